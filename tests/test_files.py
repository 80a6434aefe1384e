from __future__ import annotations

import os
import stat
import tempfile
import unittest
from pathlib import Path

from vinyard.files import FILE_MODE, read_lines, write_all


class ReadLinesTests(unittest.TestCase):
    def test_strips_terminators_including_crlf(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "in.txt"
            path.write_bytes(b"one\r\ntwo\n\nlast")
            self.assertEqual(read_lines(path), [b"one", b"two", b"", b"last"])

    def test_trailing_newline_does_not_add_empty_row(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "in.txt"
            path.write_bytes(b"a\nb\n")
            self.assertEqual(read_lines(path), [b"a", b"b"])

    def test_empty_file_has_no_rows(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.txt"
            path.write_bytes(b"")
            self.assertEqual(read_lines(path), [])

    def test_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                read_lines(Path(tmp) / "missing.txt")


class WriteAllTests(unittest.TestCase):
    def test_creates_file_with_default_mode(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "new.txt"
            previous_umask = os.umask(0)
            try:
                written = write_all(path, b"hello\n")
            finally:
                os.umask(previous_umask)
            self.assertEqual(written, 6)
            self.assertEqual(path.read_bytes(), b"hello\n")
            self.assertEqual(stat.S_IMODE(path.stat().st_mode), FILE_MODE)

    def test_truncates_longer_existing_contents(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "old.txt"
            path.write_bytes(b"a much longer previous body\n")
            write_all(path, b"short\n")
            self.assertEqual(path.read_bytes(), b"short\n")

    def test_empty_payload_empties_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "old.txt"
            path.write_bytes(b"gone\n")
            self.assertEqual(write_all(path, b""), 0)
            self.assertEqual(path.read_bytes(), b"")

    def test_unwritable_location_raises_oserror(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                write_all(Path(tmp) / "missing-dir" / "file.txt", b"x")


if __name__ == "__main__":
    unittest.main()
