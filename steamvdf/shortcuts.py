from __future__ import annotations

import copy
import dataclasses
import enum
import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple, Union

from .constants import (
    SHORTCUTS_FORMAT_NAME,
    VERSION_1,
    APP_NAME_FIELD,
    EXE_PATH_FIELD,
    START_DIR_FIELD,
    ICON_PATH_FIELD,
    SHORTCUT_PATH_FIELD,
    LAUNCH_OPTIONS_FIELD,
    IS_HIDDEN_FIELD,
    ALLOW_DESKTOP_CONFIG_FIELD,
    ALLOW_OVERLAY_FIELD,
    IS_OPEN_VR_FIELD,
    LAST_PLAY_TIME_FIELD,
    TAGS_FIELD,
    DEFAULT_FILE_MODE,
)
from .document import Document
from .errors import FieldKindMismatch
from .fields import Field, IdField, ListField, NumberField, TextField
from .records import Record


logger = logging.getLogger(__name__)

DOUBLE_QUOTE = '"'

# How an attribute is stored on the wire
_TEXT = "text"
_QUOTED = "quoted"  # text wrapped in a literal pair of double quotes
_BOOL = "bool"
_INT32 = "int32"
_LIST = "list"

# (field name, attribute, storage), in the order fields are written
_FIELD_MAP: Tuple[Tuple[str, str, str], ...] = (
    (APP_NAME_FIELD, "app_name", _TEXT),
    (EXE_PATH_FIELD, "exe_path", _QUOTED),
    (START_DIR_FIELD, "start_dir", _QUOTED),
    (ICON_PATH_FIELD, "icon_path", _TEXT),
    (SHORTCUT_PATH_FIELD, "shortcut_path", _TEXT),
    (LAUNCH_OPTIONS_FIELD, "launch_options", _TEXT),
    (IS_HIDDEN_FIELD, "is_hidden", _BOOL),
    (ALLOW_DESKTOP_CONFIG_FIELD, "allow_desktop_config", _BOOL),
    (ALLOW_OVERLAY_FIELD, "allow_overlay", _BOOL),
    (IS_OPEN_VR_FIELD, "is_open_vr", _BOOL),
    (LAST_PLAY_TIME_FIELD, "last_play_time", _INT32),
    (TAGS_FIELD, "tags", _LIST),
)
_BY_NAME: Dict[str, Tuple[str, str]] = {name: (attr, storage) for name, attr, storage in _FIELD_MAP}


def add_double_quotes(s: str) -> str:
    """Wrap ``s`` in one pair of double quotes. Empty stays empty."""
    if not s:
        return s
    return DOUBLE_QUOTE + s + DOUBLE_QUOTE


def trim_double_quotes(s: str) -> str:
    """Strip at most one double quote from each end."""
    if s.endswith(DOUBLE_QUOTE):
        s = s[: -len(DOUBLE_QUOTE)]
    if s.startswith(DOUBLE_QUOTE):
        s = s[len(DOUBLE_QUOTE) :]
    return s


@dataclass
class Shortcut:
    """A single non-Steam application shortcut."""

    id: int = 0
    app_name: str = ""
    exe_path: str = ""
    start_dir: str = ""
    icon_path: str = ""
    shortcut_path: str = ""
    launch_options: str = ""
    is_hidden: bool = False
    allow_desktop_config: bool = False
    allow_overlay: bool = False
    is_open_vr: bool = False
    last_play_time: int = 0
    tags: List[str] = field(default_factory=list)

    def to_record(self) -> Record:
        """All fixed fields, in canonical order, whatever their value."""
        record = Record([IdField(self.id)])
        for name, attr, storage in _FIELD_MAP:
            record.append(_to_field(name, storage, getattr(self, attr)))
        return record

    @classmethod
    def from_record(cls, record: Record) -> "Shortcut":
        """Build from a record by field name. Unknown names are ignored."""
        sc = cls()
        for f in record.fields:
            if isinstance(f, IdField):
                sc.id = f.value
                continue
            entry = _BY_NAME.get(f.name)  # type: ignore[attr-defined]
            if entry is None:
                logger.debug("ignoring unknown field %r", f.name)  # type: ignore[attr-defined]
                continue
            attr, storage = entry
            setattr(sc, attr, _from_field(f, storage))
        return sc


def _to_field(name: str, storage: str, value) -> Field:
    if storage == _TEXT:
        return TextField.from_str(name, value)
    if storage == _QUOTED:
        return TextField.from_str(name, add_double_quotes(value))
    if storage == _BOOL:
        return NumberField.from_bool(name, bool(value))
    if storage == _INT32:
        return NumberField(name, int(value))
    if storage == _LIST:
        return ListField.from_strs(name, value)
    raise ValueError(f"unknown storage {storage!r}")


def _from_field(f: Field, storage: str):
    expected = {
        _TEXT: TextField,
        _QUOTED: TextField,
        _BOOL: NumberField,
        _INT32: NumberField,
        _LIST: ListField,
    }[storage]
    if not isinstance(f, expected):
        raise FieldKindMismatch(
            f"field {f.name!r} is a {type(f).__name__}, expected {expected.__name__}"  # type: ignore[attr-defined]
        )
    if storage == _TEXT:
        return f.text()  # type: ignore[attr-defined]
    if storage == _QUOTED:
        return trim_double_quotes(f.text())  # type: ignore[attr-defined]
    if storage == _BOOL:
        return f.as_bool()  # type: ignore[attr-defined]
    if storage == _INT32:
        return f.value  # type: ignore[attr-defined]
    return f.texts()  # type: ignore[attr-defined]


# -------- Reading and writing --------

def loads_shortcuts(data: bytes, *, strict_lists: bool = False) -> List[Shortcut]:
    doc = Document.parse(data, SHORTCUTS_FORMAT_NAME, strict_lists=strict_lists)
    return [Shortcut.from_record(r) for r in doc.records]


def read_shortcuts(fh: BinaryIO, *, strict_lists: bool = False) -> List[Shortcut]:
    return loads_shortcuts(fh.read(), strict_lists=strict_lists)


def dumps_shortcuts(shortcuts: List[Shortcut]) -> bytes:
    doc = Document(SHORTCUTS_FORMAT_NAME, VERSION_1, [s.to_record() for s in shortcuts])
    return doc.dumps()


def write_shortcuts(shortcuts: List[Shortcut], fh: BinaryIO) -> int:
    data = dumps_shortcuts(shortcuts)
    fh.write(data)
    return len(data)


def overwrite_file(fh: BinaryIO, shortcuts: List[Shortcut]) -> None:
    """Replace the whole contents of an open read-write file.

    The document is rendered before the file is touched, so a shortcut that
    cannot be encoded leaves the file as it was.
    """
    data = dumps_shortcuts(shortcuts)
    fh.seek(0)
    fh.truncate(0)
    fh.write(data)
    fh.flush()


# -------- Create or update --------

class UpdateResult(enum.Enum):
    UNCHANGED = "No changes were made to the file"
    CREATED_NEW_FILE = "Created new file"
    UPDATED_ENTRY = "Updated existing entry in the file"
    ADDED_NEW_ENTRY = "Added new entry to the file"


@dataclass(frozen=True)
class Found:
    """A shortcut whose app name matched. ``shortcut`` is a copy."""

    shortcut: Shortcut


@dataclass(frozen=True)
class NotFound:
    name: str


Match = Union[Found, NotFound]
UpdateFunc = Callable[[Match], Optional[Shortcut]]


def apply_update(shortcuts: List[Shortcut], match_name: str, update: UpdateFunc) -> Tuple[List[Shortcut], UpdateResult]:
    """Pure part of create_or_update.

    ``update`` receives Found(copy of the first shortcut named ``match_name``)
    or NotFound(match_name) and returns the shortcut to store, or None to
    leave the list alone. A new shortcut gets the next free position as id.
    """
    result = list(shortcuts)
    for i, s in enumerate(result):
        if s.app_name == match_name:
            replacement = update(Found(copy.deepcopy(s)))
            if replacement is None:
                return result, UpdateResult.UNCHANGED
            result[i] = replacement
            return result, UpdateResult.UPDATED_ENTRY

    new = update(NotFound(match_name))
    if new is None:
        return result, UpdateResult.UNCHANGED
    result.append(dataclasses.replace(new, id=len(result)))
    return result, UpdateResult.ADDED_NEW_ENTRY


def create_or_update(
    path: str,
    match_name: str,
    update: UpdateFunc,
    *,
    mode: int = DEFAULT_FILE_MODE,
    strict_lists: bool = False,
) -> UpdateResult:
    """Update the shortcut named ``match_name`` in the file at ``path``, or add one.

    The file is parsed, the list is changed in memory, and the whole file is
    rewritten through the same handle (rewind, truncate, write). A missing
    file is created with ``mode`` unless ``update`` returns None.
    """
    if not match_name:
        raise ValueError("the shortcut name to match cannot be empty")
    if not path:
        raise ValueError("the shortcut file path cannot be empty")
    if not callable(update):
        raise ValueError("the update function must be callable")

    if not os.path.exists(path):
        shortcuts, result = apply_update([], match_name, update)
        if result is UpdateResult.UNCHANGED:
            return result
        data = dumps_shortcuts(shortcuts)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        logger.debug("created %s with %d shortcut(s)", path, len(shortcuts))
        return UpdateResult.CREATED_NEW_FILE

    with open(path, "r+b") as fh:
        current = read_shortcuts(fh, strict_lists=strict_lists)
        shortcuts, result = apply_update(current, match_name, update)
        if result is not UpdateResult.UNCHANGED:
            overwrite_file(fh, shortcuts)
    logger.debug("%s: %s", path, result.value)
    return result
