from __future__ import annotations

import hashlib
import io
import unittest

from steamvdf.document import Document
from steamvdf.errors import (
    InvalidIdentifier,
    MalformedHeader,
    TruncatedField,
    UnknownFieldType,
    UnsupportedFormatVersion,
)
from steamvdf.fields import IdField, ListField, NumberField, TextField
from steamvdf.framing import FrameSpec, join_records, split_records
from steamvdf.records import Record

from vdf_fixtures import DELIM, EMPTY, FOOTER, HEADER, RECORD_0, RECORD_1, RECORD_2, THREE_ENTRIES


SPEC = FrameSpec("shortcuts")


class FramingTests(unittest.TestCase):
    def test_regions(self):
        self.assertEqual(SPEC.header, b"\x00shortcuts\x00\x00")
        self.assertEqual(SPEC.delimiter, b"\x08\x08\x00")
        self.assertEqual(SPEC.footer, b"\x08\x08\x08\x08")

    def test_split_and_join(self):
        data = HEADER + b"AAA" + DELIM + b"BBB" + FOOTER
        chunks = split_records(data, SPEC)
        self.assertEqual(chunks, [b"AAA", b"BBB"])
        self.assertEqual(join_records(chunks, SPEC), data)

    def test_three_entries(self):
        self.assertEqual(split_records(THREE_ENTRIES, SPEC), [RECORD_0, RECORD_1, RECORD_2])

    def test_empty_stream(self):
        self.assertEqual(split_records(EMPTY, SPEC), [])
        self.assertEqual(join_records([], SPEC), EMPTY)

    def test_bytes_after_footer_are_ignored(self):
        data = HEADER + b"AAA" + FOOTER + b"trailing junk"
        self.assertEqual(split_records(data, SPEC), [b"AAA"])
        data = HEADER + b"AAA" + DELIM + b"BBB" + FOOTER + DELIM + b"more" + DELIM
        self.assertEqual(split_records(data, SPEC), [b"AAA", b"BBB"])

    def test_delimiter_after_footer_does_not_reach_the_records(self):
        doc = Document.parse(THREE_ENTRIES + b"\x08\x08\x00trailing", "shortcuts")
        self.assertEqual([r.id for r in doc], [0, 1, 2])
        self.assertEqual(doc.dumps(), THREE_ENTRIES)

    def test_missing_header(self):
        with self.assertRaises(MalformedHeader):
            split_records(b"not a vdf" + FOOTER, SPEC)

    def test_wrong_format_name(self):
        with self.assertRaises(MalformedHeader) as ctx:
            split_records(b"\x00screenshots\x00\x00AAA" + FOOTER, SPEC)
        self.assertIn("screenshots", str(ctx.exception))

    def test_missing_footer(self):
        with self.assertRaises(MalformedHeader):
            split_records(HEADER + b"AAA" + DELIM + b"BBB", SPEC)

    def test_unsupported_version(self):
        with self.assertRaises(UnsupportedFormatVersion):
            FrameSpec("shortcuts", version=2)

    def test_name_must_be_ascii(self):
        with self.assertRaises(ValueError):
            FrameSpec("")
        with self.assertRaises(ValueError):
            FrameSpec("résumé")


class DocumentTests(unittest.TestCase):
    def test_three_entry_stream(self):
        doc = Document.parse(THREE_ENTRIES, "shortcuts")
        self.assertEqual(doc.name, "shortcuts")
        self.assertEqual(doc.version, 1)
        self.assertEqual([r.id for r in doc], [0, 1, 2])
        first = doc.records[0]
        self.assertEqual(first.get("AppName"), TextField("AppName", b"Chess"))
        self.assertEqual(first.get("Exe").value, b'"/Applications/Chess.app"')
        self.assertEqual(first.get("LastPlayTime"), NumberField("LastPlayTime", 1538448950))
        self.assertEqual(first.get("tags"), ListField("tags", (b"junk", b"eee")))
        self.assertEqual(doc.records[1].get("tags").values, ())
        self.assertEqual(doc.records[2].get("OpenVR").value, 1)

    def test_byte_exact_roundtrip(self):
        doc = Document.parse(THREE_ENTRIES, "shortcuts")
        out = doc.dumps()
        self.assertEqual(out, THREE_ENTRIES)
        self.assertEqual(hashlib.sha1(out).hexdigest(), hashlib.sha1(THREE_ENTRIES).hexdigest())

    def test_build_then_parse(self):
        records = [
            Record([IdField(0), TextField("AppName", b"one"), ListField("tags", (b"a",))]),
            Record([IdField(1), NumberField("IsHidden", 1), TextField("AppName", b"two")]),
        ]
        doc = Document("shortcuts", records=records)
        again = Document.parse(doc.dumps(), "shortcuts")
        self.assertEqual(again, doc)
        self.assertEqual(again.dumps(), doc.dumps())

    def test_read_and_write_file_objects(self):
        doc = Document.read(io.BytesIO(THREE_ENTRIES), "shortcuts")
        self.assertEqual(len(doc), 3)
        buf = io.BytesIO()
        n = doc.write(buf)
        self.assertEqual(n, len(THREE_ENTRIES))
        self.assertEqual(buf.getvalue(), THREE_ENTRIES)

    def test_empty_document(self):
        doc = Document("shortcuts")
        self.assertEqual(doc.dumps(), EMPTY)
        self.assertEqual(len(Document.parse(EMPTY, "shortcuts")), 0)

    def test_fail_fast_keeps_parsed_records(self):
        broken = b"1\x00\x01AppName\x00Calc\x00\x09Bad\x00"
        data = HEADER + RECORD_0 + DELIM + broken + DELIM + RECORD_2 + FOOTER
        with self.assertRaises(UnknownFieldType) as ctx:
            Document.parse(data, "shortcuts")
        exc = ctx.exception
        self.assertEqual(len(exc.records), 1)
        self.assertEqual(exc.records[0].id, 0)
        self.assertEqual(exc.record.fields, [IdField(1), TextField("AppName", b"Calc")])

    def test_bad_identifier_in_stream(self):
        data = HEADER + b"x\x00" + FOOTER
        with self.assertRaises(InvalidIdentifier) as ctx:
            Document.parse(data, "shortcuts")
        self.assertEqual(ctx.exception.records, [])

    def test_wrong_name(self):
        with self.assertRaises(MalformedHeader):
            Document.parse(THREE_ENTRIES, "screenshots")

    def test_unsupported_version(self):
        with self.assertRaises(UnsupportedFormatVersion):
            Document("shortcuts", 2)
        with self.assertRaises(UnsupportedFormatVersion):
            Document.parse(THREE_ENTRIES, "shortcuts", version=3)

    def test_strict_lists_flag_reaches_parser(self):
        record = b"0\x00\x00tags\x00\x011\x00x\x00"
        lenient = Document.parse(HEADER + record + FOOTER, "shortcuts")
        self.assertEqual(lenient.records[0].get("tags").values, ())
        with self.assertRaises(TruncatedField):
            Document.parse(HEADER + record + FOOTER, "shortcuts", strict_lists=True)


if __name__ == "__main__":
    unittest.main()
