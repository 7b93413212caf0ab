from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from typing import List

from .constants import DEFAULT_IMAGE_MODE
from .locations import DataVerifier
from .naming import legacy_non_steam_game_id


logger = logging.getLogger(__name__)


@dataclass
class ImageDetails:
    """Owner and game a grid image belongs to.

    ``game_executable_path`` is the executable path exactly as stored in the
    shortcut, including any quotation marks.
    """

    verifier: DataVerifier
    owner_user_id: str
    game_name: str
    game_executable_path: str

    def validate(self) -> None:
        if self.verifier is None:
            raise ValueError("the DataVerifier cannot be None")
        if not self.owner_user_id or not self.owner_user_id.strip():
            raise ValueError("please specify a Steam user ID")

    def game_id(self) -> str:
        return legacy_non_steam_game_id(self.game_name, self.game_executable_path)

    def file_path(self, extension: str = "") -> str:
        """Grid image path for this game; the grid directory must exist, the image need not."""
        self.validate()
        grid_dir = self.verifier.grid_dir_path(self.owner_user_id)
        return os.path.join(grid_dir, self.game_id()) + extension


def add_image(details: ImageDetails, source_path: str, *, overwrite: bool = False, mode: int = DEFAULT_IMAGE_MODE) -> str:
    """Copy ``source_path`` into the grid slot for ``details``; returns the destination.

    The source file extension is kept. An existing image is left alone unless
    ``overwrite`` is set.
    """
    details.validate()
    if not source_path or not source_path.strip():
        raise ValueError("please specify a tile image source path")

    dest = details.file_path(os.path.splitext(source_path)[1])
    if not overwrite and os.path.exists(dest):
        logger.debug("grid image %s already exists; leaving it", dest)
        return dest

    with open(source_path, "rb") as src:
        fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as dst:
            shutil.copyfileobj(src, dst)
    return dest


def remove_image(details: ImageDetails, extension: str = "") -> List[str]:
    """Remove the grid image(s) for ``details``; returns the removed paths.

    With an ``extension`` only that exact file is targeted, otherwise every
    file whose name starts with the game id.
    """
    target = details.file_path(extension)
    if extension:
        try:
            os.remove(target)
        except FileNotFoundError:
            logger.debug("no grid image at %s", target)
            return []
        return [target]

    grid_dir, prefix = os.path.split(target)
    removed = []
    for name in sorted(os.listdir(grid_dir)):
        p = os.path.join(grid_dir, name)
        if os.path.isdir(p) or not name.startswith(prefix):
            continue
        try:
            os.remove(p)
        except OSError as exc:
            logger.warning("failed to remove grid image %s: %s", p, exc)
            continue
        removed.append(p)
    return removed
