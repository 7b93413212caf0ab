from __future__ import annotations

"""
Hand-assembled shortcuts.vdf streams shared by the test modules.

Built from raw bytes so that the tests do not depend on the encoder they check.
"""

import struct

HEADER = b"\x00shortcuts\x00\x00"
DELIM = b"\x08\x08\x00"
FOOTER = b"\x08\x08\x08\x08"


def text(name: bytes, value: bytes) -> bytes:
    return b"\x01" + name + b"\x00" + value + b"\x00"


def int32(name: bytes, value: int) -> bytes:
    return b"\x02" + name + b"\x00" + struct.pack("<i", value)


def tag_list(values) -> bytes:
    out = b"\x00tags"
    for i, v in enumerate(values):
        out += b"\x00\x01" + str(i).encode("ascii") + b"\x00" + v
    return out + b"\x00"


def shortcut_record(
    rid: int,
    app_name: bytes,
    exe: bytes,
    start_dir: bytes,
    *,
    icon: bytes = b"",
    shortcut_path: bytes = b"",
    launch_options: bytes = b"",
    hidden: int = 0,
    desktop_config: int = 1,
    overlay: int = 1,
    openvr: int = 0,
    last_play_time: int = 0,
    tags=(),
) -> bytes:
    return (
        str(rid).encode("ascii")
        + b"\x00"
        + text(b"AppName", app_name)
        + text(b"Exe", exe)
        + text(b"StartDir", start_dir)
        + text(b"icon", icon)
        + text(b"ShortcutPath", shortcut_path)
        + text(b"LaunchOptions", launch_options)
        + int32(b"IsHidden", hidden)
        + int32(b"AllowDesktopConfig", desktop_config)
        + int32(b"AllowOverlay", overlay)
        + int32(b"OpenVR", openvr)
        + int32(b"LastPlayTime", last_play_time)
        + tag_list(tags)
    )


RECORD_0 = shortcut_record(
    0,
    b"Chess",
    b'"/Applications/Chess.app"',
    b'"/Applications"',
    last_play_time=1538448950,
    tags=(b"junk", b"eee"),
)
RECORD_1 = shortcut_record(
    1,
    b"Calculator",
    b'"/Applications/Calculator.app"',
    b'"/Applications"',
    icon=b"/icons/calc.png",
    launch_options=b'-one -two "-three and some"',
    hidden=1,
    desktop_config=0,
)
RECORD_2 = shortcut_record(
    2,
    b"Dolphin",
    b'"D:\\Program Files\\Dolphin\\Dolphin.exe"',
    b'"D:\\Program Files\\Dolphin"',
    shortcut_path=b"/shortcuts/dolphin.lnk",
    overlay=0,
    openvr=1,
    last_play_time=-5,
    tags=(b"emulator",),
)

THREE_ENTRIES = HEADER + RECORD_0 + DELIM + RECORD_1 + DELIM + RECORD_2 + FOOTER
EMPTY = HEADER + FOOTER

# Attribute values of THREE_ENTRIES as the shortcut adapter reads them
THREE_ENTRIES_EXPECTED = [
    dict(
        id=0,
        app_name="Chess",
        exe_path="/Applications/Chess.app",
        start_dir="/Applications",
        icon_path="",
        shortcut_path="",
        launch_options="",
        is_hidden=False,
        allow_desktop_config=True,
        allow_overlay=True,
        is_open_vr=False,
        last_play_time=1538448950,
        tags=["junk", "eee"],
    ),
    dict(
        id=1,
        app_name="Calculator",
        exe_path="/Applications/Calculator.app",
        start_dir="/Applications",
        icon_path="/icons/calc.png",
        shortcut_path="",
        launch_options='-one -two "-three and some"',
        is_hidden=True,
        allow_desktop_config=False,
        allow_overlay=True,
        is_open_vr=False,
        last_play_time=0,
        tags=[],
    ),
    dict(
        id=2,
        app_name="Dolphin",
        exe_path="D:\\Program Files\\Dolphin\\Dolphin.exe",
        start_dir="D:\\Program Files\\Dolphin",
        icon_path="",
        shortcut_path="/shortcuts/dolphin.lnk",
        launch_options="",
        is_hidden=False,
        allow_desktop_config=True,
        allow_overlay=False,
        is_open_vr=True,
        last_play_time=-5,
        tags=["emulator"],
    ),
]
