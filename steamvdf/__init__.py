"""
steamvdf: read and write Steam's binary shortcuts.vdf record format.

Features:

- Byte-exact codec for the length-implicit, control-byte-delimited record stream
  (header, records split by 0x08 0x08 0x00, 0x08 x4 footer).
- Typed fields (identifier, text, int32/bool, string list) parsed by a single-pass
  record parser, with a serializer that is its exact inverse.
- Shortcut records with create-or-update by application name.
- Steam data directory discovery, legacy non-Steam game ids and grid images.

Parsing then re-serializing a document reproduces the input bytes.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "fields",
    "records",
    "framing",
    "document",
    "shortcuts",
    "locations",
    "naming",
    "grid",
]

# Programmatic API: steamvdf.document.Document for generic records and
# steamvdf.shortcuts for shortcut files; the CLI lives in steamvdf.cli.
