from __future__ import annotations

import argparse
import dataclasses
import json as _json
import logging
import sys
from typing import Dict, List, Optional

from steamvdf.errors import FormatError, SteamNotFound, VdfError
from steamvdf.grid import ImageDetails, add_image, remove_image
from steamvdf.locations import DataVerifier, is_installed
from steamvdf.naming import legacy_non_steam_game_id
from steamvdf.shortcuts import (
    Found,
    Match,
    Shortcut,
    create_or_update,
    read_shortcuts,
)


def _user_ids(verifier: DataVerifier, user: Optional[str]) -> List[str]:
    """The requested user, or every user below the data directory."""
    if user:
        return [user]
    ids = verifier.user_ids()
    if not ids:
        raise FileNotFoundError(f"no user data directories exist in {verifier.user_data_dir_path()}")
    return ids


# -------- Commands --------

def cmd_installed() -> bool:
    ok = is_installed()
    print("Steam is installed" if ok else "Steam is *not* installed")
    return ok


def cmd_info(*, data_dir: Optional[str] = None) -> bool:
    verifier = DataVerifier(data_dir)
    print(f"Root data path: {verifier.root_dir_path()}")
    print(f"User data directory path: {verifier.user_data_dir_path()}")
    ok = True
    for user_id, dir_path in verifier.user_ids_to_data_dir_paths().items():
        print(f"ID: {user_id} - Location: {dir_path}")
        try:
            shortcuts_path = verifier.shortcuts_file_path(user_id)
        except FileNotFoundError as exc:
            print(f"Warning: no shortcuts file for {user_id}: {exc}", file=sys.stderr)
            ok = False
            continue
        print(f"  Shortcuts file: {shortcuts_path}")
    return ok


def cmd_list(path: str, *, as_json: bool = False, strict_lists: bool = False) -> bool:
    with open(path, "rb") as fh:
        shortcuts = read_shortcuts(fh, strict_lists=strict_lists)
    if as_json:
        print(_json.dumps([dataclasses.asdict(s) for s in shortcuts], indent=2))
        return True
    for s in shortcuts:
        print(f"ID: {s.id}")
        print(f"  Application name: {s.app_name}")
        print(f"  Executable: {s.exe_path}")
        print(f"  Start dir: {s.start_dir}")
        if s.icon_path:
            print(f"  Icon: {s.icon_path}")
        if s.launch_options:
            print(f"  Launch options: {s.launch_options}")
        print(f"  Hidden: {s.is_hidden}  Overlay: {s.allow_overlay}  OpenVR: {s.is_open_vr}")
        print(f"  Last play time: {s.last_play_time}")
        if s.tags:
            print(f"  Tags: {', '.join(s.tags)}")
    print(f"{len(shortcuts)} shortcut(s)")
    return True


def cmd_update(
    path: str,
    name: str,
    *,
    changes: Dict[str, object],
    create: bool = True,
    strict_lists: bool = False,
) -> bool:
    """Create or update the shortcut called ``name`` with ``changes`` (Shortcut attribute -> value)."""

    def update(match: Match) -> Optional[Shortcut]:
        if isinstance(match, Found):
            return dataclasses.replace(match.shortcut, **changes)
        if not create:
            return None
        return Shortcut(app_name=match.name, **changes)

    result = create_or_update(path, name, update, strict_lists=strict_lists)
    print(result.value)
    return True


def cmd_legacy_id(name: str, exe: str) -> bool:
    print(legacy_non_steam_game_id(name, exe))
    return True


def cmd_grid_add(
    image: str,
    name: str,
    exe: str,
    *,
    user: Optional[str] = None,
    overwrite: bool = False,
    data_dir: Optional[str] = None,
) -> bool:
    verifier = DataVerifier(data_dir)
    for user_id in _user_ids(verifier, user):
        details = ImageDetails(verifier, user_id, name, exe)
        dest = add_image(details, image, overwrite=overwrite)
        print(f"{user_id}: {dest}")
    return True


def cmd_grid_remove(
    name: str,
    exe: str,
    *,
    user: Optional[str] = None,
    extension: str = "",
    data_dir: Optional[str] = None,
) -> bool:
    verifier = DataVerifier(data_dir)
    total = 0
    for user_id in _user_ids(verifier, user):
        details = ImageDetails(verifier, user_id, name, exe)
        for p in remove_image(details, extension):
            print(f"   removed: {p}")
            total += 1
    print(f"Removed {total} grid image(s)")
    return True


def _collect_changes(args: argparse.Namespace) -> Dict[str, object]:
    changes: Dict[str, object] = {}
    for opt, attr in (
        ("exe", "exe_path"),
        ("start_dir", "start_dir"),
        ("icon", "icon_path"),
        ("shortcut_path", "shortcut_path"),
        ("launch_options", "launch_options"),
        ("hidden", "is_hidden"),
        ("overlay", "allow_overlay"),
        ("desktop_config", "allow_desktop_config"),
        ("openvr", "is_open_vr"),
        ("last_play_time", "last_play_time"),
        ("tags", "tags"),
    ):
        value = getattr(args, opt)
        if value is not None:
            changes[attr] = value
    return changes


def _add_flag_pair(ap: argparse.ArgumentParser, name: str, help_text: str) -> None:
    dest = name.replace("-", "_")
    grp = ap.add_mutually_exclusive_group()
    grp.add_argument(f"--{name}", dest=dest, action="store_const", const=True, default=None, help=help_text)
    grp.add_argument(f"--no-{name}", dest=dest, action="store_const", const=False, help=f"Clear: {help_text.lower()}")


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="steamvdf",
        description="Read and edit Steam shortcuts.vdf files",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Log debug details to stderr")
    ap.add_argument(
        "--strict-lists",
        action="store_true",
        help="Fail on list elements whose index does not match their position (default: truncate the list)",
    )
    ap.add_argument("--data-dir", help="Steam data directory (default: auto-detect or $STEAMVDF_DATA_DIR)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    sub.add_parser("installed", help="Report whether Steam is installed")
    sub.add_parser("info", help="Show Steam data locations per user")

    ap_list = sub.add_parser("list", help="List shortcuts in a shortcuts.vdf file")
    ap_list.add_argument("file", help="shortcuts.vdf path")
    ap_list.add_argument("--json", action="store_true", help="Emit JSON")

    ap_update = sub.add_parser("update", help="Create or update a shortcut by application name")
    ap_update.add_argument("file", help="shortcuts.vdf path (created if missing)")
    ap_update.add_argument("name", help="Application name to match")
    ap_update.add_argument("--exe", help="Executable path")
    ap_update.add_argument("--start-dir", help="Start directory")
    ap_update.add_argument("--icon", help="Icon path")
    ap_update.add_argument("--shortcut-path", help="Alternate shortcut path")
    ap_update.add_argument("--launch-options", help="Launch arguments")
    ap_update.add_argument("--last-play-time", type=int, help="Last play time (epoch seconds)")
    ap_update.add_argument("--tag", dest="tags", action="append", help="Tag (repeat for more; replaces existing tags)")
    _add_flag_pair(ap_update, "hidden", "Hide the shortcut")
    _add_flag_pair(ap_update, "overlay", "Allow the overlay")
    _add_flag_pair(ap_update, "desktop-config", "Allow desktop configuration")
    _add_flag_pair(ap_update, "openvr", "Mark as an OpenVR application")
    ap_update.add_argument("--no-create", action="store_true", help="Only update; do not add a missing shortcut")

    ap_id = sub.add_parser("legacy-id", help="Print the legacy non-Steam game id")
    ap_id.add_argument("name", help="Game name")
    ap_id.add_argument("exe", help="Executable path as stored in the shortcut (quotes included)")

    ap_gadd = sub.add_parser("grid-add", help="Add a grid image for a game")
    ap_gadd.add_argument("image", help="Image file path")
    ap_gadd.add_argument("name", help="Game name")
    ap_gadd.add_argument("exe", help="Executable path as stored in the shortcut (quotes included)")
    ap_gadd.add_argument("--user", help="Steam user ID (default: every user)")
    ap_gadd.add_argument("--overwrite", action="store_true", help="Replace an existing image")

    ap_grm = sub.add_parser("grid-remove", help="Remove grid images for a game")
    ap_grm.add_argument("name", help="Game name")
    ap_grm.add_argument("exe", help="Executable path as stored in the shortcut (quotes included)")
    ap_grm.add_argument("--user", help="Steam user ID (default: every user)")
    ap_grm.add_argument("--ext", default="", help="Only remove the image with this extension (e.g. .png)")

    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.cmd == "installed":
            success = cmd_installed()
        elif args.cmd == "info":
            success = cmd_info(data_dir=args.data_dir)
        elif args.cmd == "list":
            success = cmd_list(args.file, as_json=args.json, strict_lists=args.strict_lists)
        elif args.cmd == "update":
            success = cmd_update(
                args.file,
                args.name,
                changes=_collect_changes(args),
                create=not args.no_create,
                strict_lists=args.strict_lists,
            )
        elif args.cmd == "legacy-id":
            success = cmd_legacy_id(args.name, args.exe)
        elif args.cmd == "grid-add":
            success = cmd_grid_add(
                args.image, args.name, args.exe, user=args.user, overwrite=args.overwrite, data_dir=args.data_dir
            )
        elif args.cmd == "grid-remove":
            success = cmd_grid_remove(args.name, args.exe, user=args.user, extension=args.ext, data_dir=args.data_dir)
        else:
            raise RuntimeError("Unknown command")
        sys.exit(0 if success else 1)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except SteamNotFound as e:
        print(f"Error: {e}. Pass --data-dir or set STEAMVDF_DATA_DIR.", file=sys.stderr)
        sys.exit(2)
    except FormatError as e:
        where = f" (record byte offset {e.offset})" if e.offset is not None else ""
        print(f"Error: malformed shortcuts file: {e}{where}", file=sys.stderr)
        sys.exit(2)
    except (ValueError, VdfError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
