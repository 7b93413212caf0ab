import enum


# Control bytes
NUL = 0x00
SOH = 0x01
STX = 0x02
BS = 0x08


class FieldKind(enum.IntEnum):
    """Type tag byte that precedes a named field."""

    LIST = NUL
    TEXT = SOH
    NUMBER = STX


# Format versions
VERSION_1 = 1
SUPPORTED_VERSIONS = (VERSION_1,)

# Framing (version 1)
RECORD_DELIMITER_V1 = bytes([BS, BS, NUL])
FOOTER_V1 = bytes([BS, BS, BS, BS])

# The identifier field is unnamed on the wire; this is the name it is given
# in memory so that every field can be looked up by name.
ID_FIELD_NAME = "reserved_id_v1"
ID_MAX_DIGITS = 10

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


# Shortcuts file
SHORTCUTS_FORMAT_NAME = "shortcuts"
SHORTCUTS_FILE_NAME = "shortcuts.vdf"

APP_NAME_FIELD = "AppName"
EXE_PATH_FIELD = "Exe"
START_DIR_FIELD = "StartDir"
ICON_PATH_FIELD = "icon"
SHORTCUT_PATH_FIELD = "ShortcutPath"
LAUNCH_OPTIONS_FIELD = "LaunchOptions"
IS_HIDDEN_FIELD = "IsHidden"
ALLOW_DESKTOP_CONFIG_FIELD = "AllowDesktopConfig"
ALLOW_OVERLAY_FIELD = "AllowOverlay"
IS_OPEN_VR_FIELD = "OpenVR"
LAST_PLAY_TIME_FIELD = "LastPlayTime"
TAGS_FIELD = "tags"

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


# Steam data directory layout
USER_DATA_DIR_NAME = "userdata"
USER_CONFIG_DIR_NAME = "config"
GRID_DIR_NAME = "grid"
DATA_DIR_ENV = "STEAMVDF_DATA_DIR"

DEFAULT_FILE_MODE = 0o644
DEFAULT_IMAGE_MODE = 0o644
