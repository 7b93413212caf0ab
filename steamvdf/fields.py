from __future__ import annotations

"""
Field codec for version 1 records.

Encoding
- Identifier: ASCII decimal digits || 0x00 (unnamed, always first)
- Text:   0x01 || name || 0x00 || bytes || 0x00
- Number: 0x02 || name || 0x00 || int32 little-endian (booleans are 0 / 1)
- List:   0x00 || name || (0x00 0x01 || decimal index || 0x00 || bytes)* || 0x00

There are no length prefixes. Text values end at the first 0x00, numbers are
always 4 bytes, and a list runs for as long as the next byte is 0x01 followed
by a decimal index and 0x00. The 0x00 that ends a list element doubles as the
leading 0x00 of the next element, or as the list terminator.
"""

import logging
import struct
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union

from .constants import (
    NUL,
    SOH,
    STX,
    FieldKind,
    ID_FIELD_NAME,
    INT32_MIN,
    INT32_MAX,
    TEXT_ENCODING,
    TEXT_ERRORS,
)
from .errors import TruncatedField, UnknownFieldType


logger = logging.getLogger(__name__)

_INT32 = struct.Struct("<i")
_DIGITS = b"0123456789"


@dataclass(frozen=True)
class Cursor:
    """Read position into a borrowed buffer. Reads return a new Cursor."""

    data: bytes
    offset: int = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    def peek(self) -> Optional[int]:
        if self.at_end():
            return None
        return self.data[self.offset]

    def advance(self, n: int) -> "Cursor":
        return Cursor(self.data, self.offset + n)

    def find(self, byte: int) -> int:
        """Absolute offset of the next ``byte`` at or after the cursor, or -1."""
        return self.data.find(bytes([byte]), self.offset)

    def take(self, n: int) -> Tuple[bytes, "Cursor"]:
        if self.remaining < n:
            raise TruncatedField(
                f"expected {n} bytes, {self.remaining} remaining", offset=self.offset
            )
        return self.data[self.offset : self.offset + n], self.advance(n)

    def take_until(self, byte: int) -> Tuple[bytes, "Cursor"]:
        """Bytes up to ``byte`` (exclusive); the terminator is consumed."""
        end = self.find(byte)
        if end < 0:
            raise TruncatedField(f"missing 0x{byte:02x} terminator", offset=self.offset)
        return self.data[self.offset : end], Cursor(self.data, end + 1)


# -------- Field variants --------

class Field:
    """Base of the closed set of field kinds: IdField, TextField, NumberField, ListField."""

    __slots__ = ()


@dataclass(frozen=True)
class IdField(Field):
    """Record identifier. ``digits`` keeps the wire spelling (e.g. leading zeros) when parsed."""

    value: int
    digits: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if self.value < 0:
            raise ValueError("identifier must be non-negative")
        if self.digits is not None and (not self.digits.isdigit() or int(self.digits) != self.value):
            raise ValueError(f"identifier digits {self.digits!r} do not spell {self.value}")

    def wire_digits(self) -> str:
        return self.digits if self.digits is not None else str(self.value)

    @property
    def name(self) -> str:
        return ID_FIELD_NAME


@dataclass(frozen=True)
class TextField(Field):
    name: str
    value: bytes = b""

    @classmethod
    def from_str(cls, name: str, value: str) -> "TextField":
        return cls(name, value.encode(TEXT_ENCODING, TEXT_ERRORS))

    def text(self) -> str:
        return self.value.decode(TEXT_ENCODING, TEXT_ERRORS)


@dataclass(frozen=True)
class NumberField(Field):
    name: str
    value: int = 0

    def __post_init__(self):
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"{self.name}: {self.value} does not fit in a signed 32-bit integer")

    @classmethod
    def from_bool(cls, name: str, value: bool) -> "NumberField":
        return cls(name, 1 if value else 0)

    def as_bool(self) -> bool:
        return self.value != 0


@dataclass(frozen=True)
class ListField(Field):
    name: str
    values: Tuple[bytes, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def from_strs(cls, name: str, values: Iterable[str]) -> "ListField":
        return cls(name, tuple(v.encode(TEXT_ENCODING, TEXT_ERRORS) for v in values))

    def texts(self) -> list:
        return [v.decode(TEXT_ENCODING, TEXT_ERRORS) for v in self.values]


NamedField = Union[TextField, NumberField, ListField]
FieldValue = Union[bytes, int, Tuple[bytes, ...]]


def kind_of(f: Field) -> Optional[FieldKind]:
    """Type tag of a named field; None for the identifier."""
    if isinstance(f, IdField):
        return None
    if isinstance(f, TextField):
        return FieldKind.TEXT
    if isinstance(f, NumberField):
        return FieldKind.NUMBER
    if isinstance(f, ListField):
        return FieldKind.LIST
    raise TypeError(f"unsupported field: {f!r}")


def make_field(kind: FieldKind, name: str, value: FieldValue) -> NamedField:
    if kind is FieldKind.TEXT:
        return TextField(name, value)  # type: ignore[arg-type]
    if kind is FieldKind.NUMBER:
        return NumberField(name, value)  # type: ignore[arg-type]
    if kind is FieldKind.LIST:
        return ListField(name, value)  # type: ignore[arg-type]
    raise TypeError(f"unsupported field kind: {kind!r}")


# -------- Decoding --------

def read_type_tag(cur: Cursor) -> Tuple[FieldKind, Cursor]:
    raw, nxt = cur.take(1)
    try:
        return FieldKind(raw[0]), nxt
    except ValueError:
        raise UnknownFieldType(f"invalid field type 0x{raw[0]:02x}", offset=cur.offset) from None


def decode_value(kind: FieldKind, cur: Cursor, *, strict_lists: bool = False) -> Tuple[FieldValue, Cursor]:
    """Consume one value of ``kind`` starting at ``cur``."""
    if kind is FieldKind.TEXT:
        return cur.take_until(NUL)
    if kind is FieldKind.NUMBER:
        raw, nxt = cur.take(_INT32.size)
        return _INT32.unpack(raw)[0], nxt
    if kind is FieldKind.LIST:
        return _decode_list(cur, strict=strict_lists)
    raise TypeError(f"unsupported field kind: {kind!r}")


def _read_list_element(cur: Cursor) -> Optional[Tuple[int, bytes, Cursor]]:
    """Returns (index, text, cursor after the element) or None when no element starts here.

    A 0x01 that is not followed by a decimal index and 0x00 is the type tag of
    the next field, so nothing is consumed in that case.
    """
    if cur.peek() != SOH:
        return None
    data = cur.data
    start = cur.offset + 1
    end = start
    while end < len(data) and data[end] in _DIGITS:
        end += 1
    if end == start:
        return None
    if end >= len(data):
        raise TruncatedField("list element index is missing its terminator", offset=start)
    if data[end] != NUL:
        return None
    index = int(data[start:end])
    text_start = end + 1
    text_end = data.find(bytes([NUL]), text_start)
    if text_end < 0:
        return index, data[text_start:], Cursor(data, len(data))
    return index, data[text_start:text_end], Cursor(data, text_end + 1)


def _decode_list(cur: Cursor, *, strict: bool) -> Tuple[Tuple[bytes, ...], Cursor]:
    values = []
    mismatch = False
    while True:
        element = _read_list_element(cur)
        if element is None:
            break
        index, text, nxt = element
        if not mismatch and index != len(values):
            if strict:
                raise TruncatedField(
                    f"list element index {index} found at position {len(values)}", offset=cur.offset
                )
            logger.warning(
                "list element index %d found at position %d; keeping the first %d element(s)",
                index,
                len(values),
                len(values),
            )
            mismatch = True
        if not mismatch:
            values.append(text)
        cur = nxt
    return tuple(values), cur


# -------- Encoding --------

def encode_number(value: int) -> bytes:
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"{value} does not fit in a signed 32-bit integer")
    return _INT32.pack(value)


def encode_bool(value: bool) -> bytes:
    return encode_number(1 if value else 0)


def _encode_name(name: str) -> bytes:
    return name.encode(TEXT_ENCODING, TEXT_ERRORS)


def encode_field(f: Field) -> bytes:
    kind = kind_of(f)
    if kind is None:
        return f.wire_digits().encode("ascii") + bytes([NUL])  # type: ignore[attr-defined]
    out = bytearray([kind])
    out += _encode_name(f.name)  # type: ignore[attr-defined]
    out.append(NUL)
    if kind is FieldKind.TEXT:
        out += f.value  # type: ignore[attr-defined]
        out.append(NUL)
    elif kind is FieldKind.NUMBER:
        out += encode_number(f.value)  # type: ignore[attr-defined]
    else:
        # the name terminator doubles as the first element's leading 0x00
        for i, v in enumerate(f.values):  # type: ignore[attr-defined]
            if i:
                out.append(NUL)
            out.append(SOH)
            out += str(i).encode("ascii")
            out.append(NUL)
            out += v
        out.append(NUL)
    return bytes(out)
