"""In-memory line buffer for the editor.

Rows keep raw bytes exactly as typed and derive a tab-expanded render buffer.
Every mutating operation bumps the document dirty counter exactly once.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_TAB_STOP = 2
_BLANK_BYTES = frozenset(b" \t")
_TAB = 0x09
_LINE_TERMINATORS = frozenset(b"\r\n")


def expand_tabs(text: bytes, tab_stop: int) -> bytes:
    """Return ``text`` with each tab widened to the next ``tab_stop`` boundary."""
    if _TAB not in text:
        return bytes(text)
    out = bytearray()
    for byte in text:
        if byte == _TAB:
            out.append(0x20)
            while len(out) % tab_stop:
                out.append(0x20)
        else:
            out.append(byte)
    return bytes(out)


@dataclass
class Row:
    text: bytearray
    render: bytes = b""

    def update(self, tab_stop: int) -> None:
        self.render = expand_tabs(self.text, tab_stop)

    @property
    def display_width(self) -> int:
        return len(self.render)


@dataclass
class Cursor:
    """Cursor in buffer coordinates (``cx`` is a byte column, ``cy`` a row)."""

    cx: int = 0
    cy: int = 0

    def clamp(self, document: Document) -> None:
        """Pull the cursor back inside ``[0, num_rows]`` x ``[0, row_length]``."""
        self.cy = max(0, min(self.cy, document.num_rows))
        self.cx = max(0, min(self.cx, document.row_length(self.cy)))

    def copy(self) -> Cursor:
        return Cursor(self.cx, self.cy)


@dataclass
class Document:
    rows: list[Row] = field(default_factory=list)
    dirty: int = 0
    filename: Path | None = None
    tab_stop: int = DEFAULT_TAB_STOP

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[bytes],
        filename: Path | None = None,
        tab_stop: int = DEFAULT_TAB_STOP,
    ) -> Document:
        """Build a clean document from already-split lines."""
        document = cls(filename=filename, tab_stop=tab_stop)
        for line in lines:
            document.insert_row(document.num_rows, line)
        document.mark_clean()
        return document

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def mark_clean(self) -> None:
        self.dirty = 0

    def _new_row(self, content: bytes) -> Row:
        row = Row(bytearray(content.replace(b"\n", b"")))
        row.update(self.tab_stop)
        return row

    def row_length(self, at: int) -> int:
        """Byte length of row ``at``; the virtual row past the end is empty."""
        if 0 <= at < len(self.rows):
            return len(self.rows[at].text)
        return 0

    def render_column(self, at: int, cx: int) -> int:
        """Translate buffer column ``cx`` of row ``at`` into a render column."""
        if not 0 <= at < len(self.rows):
            return 0
        rx = 0
        for byte in self.rows[at].text[:cx]:
            if byte == _TAB:
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx

    def first_non_blank(self, at: int) -> int:
        """Index of the first non-space, non-tab byte; 0 for blank rows."""
        if not 0 <= at < len(self.rows):
            return 0
        for idx, byte in enumerate(self.rows[at].text):
            if byte not in _BLANK_BYTES:
                return idx
        return 0

    def insert_row(self, at: int, content: bytes = b"") -> None:
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, self._new_row(content))
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def insert_char(self, row: int, at: int, ch: int) -> int:
        """Insert byte ``ch`` into ``row`` and return the cursor column advance.

        ``at`` is clamped to the row. Tabs are stored raw, so the buffer
        column always advances by one; the on-screen advance comes from
        ``render_column``. Line terminators are refused.
        """
        if not 0 <= row < len(self.rows) or ch in _LINE_TERMINATORS:
            return 0
        target = self.rows[row]
        at = max(0, min(at, len(target.text)))
        target.text.insert(at, ch)
        target.update(self.tab_stop)
        self.dirty += 1
        return 1

    def delete_char(self, row: int, at: int) -> int:
        """Delete the byte before ``at`` and return how many bytes were removed."""
        if not 0 <= row < len(self.rows):
            return 0
        target = self.rows[row]
        if at <= 0 or at > len(target.text):
            return 0
        del target.text[at - 1]
        target.update(self.tab_stop)
        self.dirty += 1
        return 1

    def append_row_content(self, row: int, data: bytes) -> None:
        if not 0 <= row < len(self.rows):
            return
        target = self.rows[row]
        target.text.extend(data.replace(b"\n", b""))
        target.update(self.tab_stop)
        self.dirty += 1

    def split_row(self, row: int, at: int) -> None:
        """Break ``row`` at column ``at``, moving the tail onto a new next row."""
        if not 0 <= row < len(self.rows):
            return
        target = self.rows[row]
        at = max(0, min(at, len(target.text)))
        tail = bytes(target.text[at:])
        del target.text[at:]
        target.update(self.tab_stop)
        self.rows.insert(row + 1, self._new_row(tail))
        self.dirty += 1

    def to_serialized_bytes(self) -> tuple[bytes, int]:
        """Join rows with a trailing ``\\n`` after every row, last one included."""
        data = b"".join(bytes(row.text) + b"\n" for row in self.rows)
        return data, len(data)
