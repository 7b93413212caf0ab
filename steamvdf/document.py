from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, Iterator, List, Optional

from .constants import VERSION_1
from .errors import FormatError
from .framing import FrameSpec, iter_records, join_records
from .records import Record, parse_record, render_record


logger = logging.getLogger(__name__)


class Document:
    """An ordered list of Records plus the format name and version.

    Usage:
        doc = Document.parse(data, "shortcuts")
        doc.records[0].get("AppName")
        data == doc.dumps()   # byte-for-byte

        with open(path, "rb") as fh:
            doc = Document.read(fh, "shortcuts")
    """

    def __init__(self, name: str, version: int = VERSION_1, records: Optional[Iterable[Record]] = None):
        self.spec = FrameSpec(name, version)
        self.records: List[Record] = list(records or [])

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def version(self) -> int:
        return self.spec.version

    def append(self, record: Record) -> None:
        self.records.append(record)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.spec == other.spec and self.records == other.records

    def __repr__(self) -> str:
        return f"Document(name={self.name!r}, version={self.version}, records={len(self.records)})"

    @classmethod
    def parse(cls, data: bytes, name: str, *, version: int = VERSION_1, strict_lists: bool = False) -> "Document":
        """Parse a whole stream. The first failing record aborts the parse.

        The raised FormatError carries ``records`` (records parsed before the
        failure) and ``record`` (the partial failing record).
        """
        doc = cls(name, version)
        data = bytes(data)
        try:
            for chunk in iter_records(data, doc.spec):
                doc.records.append(parse_record(chunk, strict_lists=strict_lists))
        except FormatError as exc:
            exc.records = list(doc.records)
            logger.debug("parse of %r stopped after %d record(s): %s", name, len(doc.records), exc)
            raise
        logger.debug("parsed %d record(s) from %d byte(s)", len(doc.records), len(data))
        return doc

    @classmethod
    def read(cls, fh: BinaryIO, name: str, *, version: int = VERSION_1, strict_lists: bool = False) -> "Document":
        return cls.parse(fh.read(), name, version=version, strict_lists=strict_lists)

    def dumps(self) -> bytes:
        return join_records((render_record(r) for r in self.records), self.spec)

    def write(self, fh: BinaryIO) -> int:
        data = self.dumps()
        fh.write(data)
        return len(data)
