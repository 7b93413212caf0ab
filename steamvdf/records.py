from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .constants import NUL, ID_MAX_DIGITS
from .errors import FormatError, InvalidIdentifier
from .fields import (
    Cursor,
    Field,
    IdField,
    decode_value,
    encode_field,
    make_field,
    read_type_tag,
)


@dataclass
class Record:
    """Ordered fields of one record. The first field is the IdField."""

    fields: List[Field] = field(default_factory=list)

    def append(self, f: Field) -> None:
        self.fields.append(f)

    @property
    def id(self) -> Optional[int]:
        if self.fields and isinstance(self.fields[0], IdField):
            return self.fields[0].value
        return None

    def get(self, name: str) -> Optional[Field]:
        """First field with ``name``, or None."""
        for f in self.fields:
            if f.name == name:  # type: ignore[attr-defined]
                return f
        return None

    def names(self) -> List[str]:
        return [f.name for f in self.fields]  # type: ignore[attr-defined]

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def _parse_identifier(cur: Cursor) -> Tuple[IdField, Cursor]:
    data = cur.data
    end = cur.offset
    while end < len(data) and 0x30 <= data[end] <= 0x39:
        end += 1
    ndigits = end - cur.offset
    if ndigits == 0:
        raise InvalidIdentifier("failed to locate a valid identifier", offset=cur.offset)
    if ndigits > ID_MAX_DIGITS:
        raise InvalidIdentifier(
            f"identifier is longer than {ID_MAX_DIGITS} digits", offset=cur.offset
        )
    if end >= len(data) or data[end] != NUL:
        raise InvalidIdentifier("identifier is not terminated by 0x00", offset=end)
    digits = data[cur.offset : end].decode("ascii")
    return IdField(int(digits), digits), Cursor(data, end + 1)


def _parse_field_name(cur: Cursor) -> Tuple[Optional[str], Cursor]:
    """Field name and the cursor after its terminator.

    A name without a terminator marks the end of the record: (None, cursor).
    """
    end = cur.find(NUL)
    if end < 0:
        return None, cur.advance(cur.remaining)
    raw = cur.data[cur.offset : end]
    if not raw:
        raise InvalidIdentifier("field name is empty", offset=cur.offset)
    if not raw[:1].isalpha():
        raise InvalidIdentifier("field name does not start with a letter", offset=cur.offset)
    return raw.decode("utf-8", "surrogateescape"), Cursor(cur.data, end + 1)


def parse_record(data: bytes, *, strict_lists: bool = False) -> Record:
    """Parse one record's bytes (as split out of the stream) into a Record.

    States: identifier (once), then type tag -> field name -> value until the
    input is exhausted. Running out of input between fields is the normal end
    of a record. With ``strict_lists`` a list element whose index does not
    match its position raises TruncatedField instead of truncating the list.
    The identifier keeps its digit spelling, so leading zeros render back as
    they were read.

    On error the exception's ``record`` attribute holds the fields parsed so far.
    """
    record = Record()
    cur = Cursor(bytes(data))
    if cur.at_end():
        return record

    try:
        id_field, cur = _parse_identifier(cur)
        record.append(id_field)

        while not cur.at_end():
            kind, cur = read_type_tag(cur)
            name, cur = _parse_field_name(cur)
            if name is None:
                break
            value, cur = decode_value(kind, cur, strict_lists=strict_lists)
            record.append(make_field(kind, name, value))
    except FormatError as exc:
        exc.record = record
        raise

    return record


def render_record(record: Record) -> bytes:
    """Inverse of parse_record: fields are emitted in order, without validation."""
    return b"".join(encode_field(f) for f in record.fields)
