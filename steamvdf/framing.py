from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List

from .constants import NUL, SUPPORTED_VERSIONS, VERSION_1, RECORD_DELIMITER_V1, FOOTER_V1
from .errors import MalformedHeader, UnsupportedFormatVersion


logger = logging.getLogger(__name__)


def check_version(version: int) -> None:
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedFormatVersion(f"format version {version!r} is not supported")


@dataclass(frozen=True)
class FrameSpec:
    """Structural byte sequences of a stream named ``name``.

    Layout (version 1):
        0x00 || name || 0x00 0x00      header
        record || 0x08 0x08 0x00       delimiter after every record but the last
        0x08 0x08 0x08 0x08            footer
    """

    name: str
    version: int = VERSION_1

    def __post_init__(self):
        check_version(self.version)
        if not self.name:
            raise ValueError("a format name is required")
        try:
            self.name.encode("ascii")
        except UnicodeEncodeError:
            raise ValueError(f"format name must be ASCII: {self.name!r}") from None

    @property
    def header(self) -> bytes:
        return bytes([NUL]) + self.name.encode("ascii") + bytes([NUL, NUL])

    @property
    def delimiter(self) -> bytes:
        return RECORD_DELIMITER_V1

    @property
    def footer(self) -> bytes:
        return FOOTER_V1


def _header_error(data: bytes, spec: FrameSpec) -> MalformedHeader:
    if data[:1] == bytes([NUL]):
        end = data.find(bytes([NUL, NUL]), 1)
        if end > 0:
            found = data[1:end]
            return MalformedHeader(f"expected format {spec.name!r}, found {found!r}", offset=0)
    return MalformedHeader(f"stream does not start with a {spec.name!r} header", offset=0)


def iter_records(data: bytes, spec: FrameSpec) -> Iterator[bytes]:
    """Yield the raw bytes of each record in ``data``.

    The records region runs from the header to the first footer. Inside it the
    delimiter is searched first and the remainder up to the footer is the last
    record. Bytes after the footer are ignored, even when they contain a
    delimiter. A stream made of the header immediately followed by the footer
    holds no records.
    """
    check_version(spec.version)
    header, delim, footer = spec.header, spec.delimiter, spec.footer
    if not data.startswith(header):
        raise _header_error(data, spec)

    pos = len(header)
    end = data.find(footer, pos)
    if end < 0:
        raise MalformedHeader("stream has no footer", offset=len(data))

    first = True
    while True:
        i = data.find(delim, pos, end)
        if i < 0:
            break
        yield data[pos:i]
        pos = i + len(delim)
        first = False
    if end > pos or not first:
        yield data[pos:end]
    trailing = len(data) - (end + len(footer))
    if trailing:
        logger.debug("ignoring %d byte(s) after the footer", trailing)


def split_records(data: bytes, spec: FrameSpec) -> List[bytes]:
    return list(iter_records(data, spec))


def join_records(chunks: Iterable[bytes], spec: FrameSpec) -> bytes:
    """Inverse of split_records."""
    check_version(spec.version)
    return spec.header + spec.delimiter.join(chunks) + spec.footer
