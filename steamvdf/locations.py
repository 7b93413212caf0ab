from __future__ import annotations

"""
Steam data directory discovery.

Layout below the data directory:
    userdata/<user id>/config/shortcuts.vdf
    userdata/<user id>/config/grid/
"""

import errno
import os
import string
import sys
from typing import Dict, List, Optional

from .constants import (
    DATA_DIR_ENV,
    GRID_DIR_NAME,
    SHORTCUTS_FILE_NAME,
    USER_CONFIG_DIR_NAME,
    USER_DATA_DIR_NAME,
)
from .errors import SteamNotFound


def _candidate_data_dirs(platform: str) -> List[str]:
    home = os.path.expanduser("~")
    if platform == "darwin":
        return [os.path.join(home, "Library", "Application Support", "Steam")]
    if platform.startswith("linux"):
        return [
            os.path.join(home, ".steam", "steam"),
            os.path.join(home, ".local", "share", "Steam"),
        ]
    if platform == "win32":
        out = []
        for letter in string.ascii_uppercase:
            drive = letter + ":\\"
            out.append(os.path.join(drive, "Program Files (x86)", "Steam"))
            out.append(os.path.join(drive, "Program Files", "Steam"))
        return out
    return []


def data_dir_path(platform: Optional[str] = None) -> str:
    """Path to Steam's data directory. ``STEAMVDF_DATA_DIR`` overrides discovery."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        if not os.path.isdir(override):
            raise SteamNotFound(f"{DATA_DIR_ENV} points to a missing directory: {override}")
        return override
    candidates = _candidate_data_dirs(platform or sys.platform)
    for candidate in candidates:
        if os.path.isdir(candidate):
            return candidate
    if not candidates:
        raise SteamNotFound(f"unsupported platform: {platform or sys.platform}")
    raise SteamNotFound("failed to locate the Steam data directory")


def is_installed() -> bool:
    try:
        data_dir_path()
    except SteamNotFound:
        return False
    return True


def user_data_dir_path(data_dir: str) -> str:
    return os.path.join(data_dir, USER_DATA_DIR_NAME)


def user_id_dir_path(data_dir: str, user_id: str) -> str:
    return os.path.join(user_data_dir_path(data_dir), user_id)


def shortcuts_file_path(data_dir: str, user_id: str) -> str:
    return os.path.join(user_id_dir_path(data_dir, user_id), USER_CONFIG_DIR_NAME, SHORTCUTS_FILE_NAME)


def grid_dir_path(data_dir: str, user_id: str) -> str:
    return os.path.join(user_id_dir_path(data_dir, user_id), USER_CONFIG_DIR_NAME, GRID_DIR_NAME)


def _require(path: str, *, is_dir: bool) -> str:
    ok = os.path.isdir(path) if is_dir else os.path.isfile(path)
    if not ok:
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
    return path


class DataVerifier:
    """Builds and verifies paths below a Steam data directory."""

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = data_dir if data_dir is not None else data_dir_path()

    def root_dir_path(self) -> str:
        return self.data_dir

    def user_data_dir_path(self) -> str:
        return _require(user_data_dir_path(self.data_dir), is_dir=True)

    def user_ids_to_data_dir_paths(self) -> Dict[str, str]:
        base = self.user_data_dir_path()
        out: Dict[str, str] = {}
        for name in sorted(os.listdir(base)):
            p = os.path.join(base, name)
            if os.path.isdir(p):
                out[name] = p
        return out

    def user_ids(self) -> List[str]:
        return list(self.user_ids_to_data_dir_paths())

    def shortcuts_file_path(self, user_id: str) -> str:
        return _require(shortcuts_file_path(self.data_dir, user_id), is_dir=False)

    def grid_dir_path(self, user_id: str) -> str:
        return _require(grid_dir_path(self.data_dir, user_id), is_dir=True)
