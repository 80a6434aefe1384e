"""Rendering engine for the editor screen.

Assembles one complete ANSI frame per keystroke: text rows, status bar,
message bar, and cursor placement. Rendering never mutates editor state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .. import __version__
from ..document import Cursor, Document
from .viewport import RESERVED_ROWS, Viewport, scroll_to_cursor

__all__ = [
    "FrameContext",
    "RESERVED_ROWS",
    "Viewport",
    "build_frame",
    "build_message_line",
    "build_status_line",
    "scroll_to_cursor",
]

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
LINE_END = b"\r\n"
FILLER = b"~"
MAX_FILENAME_CHARS = 20
APP_TITLE = "Vinyard"


@dataclass
class FrameContext:
    document: Document
    cursor: Cursor
    viewport: Viewport
    mode_label: str = ""
    message: str = ""

    @property
    def render_col(self) -> int:
        return self.document.render_column(self.cursor.cy, self.cursor.cx)


def welcome_banner(width: int) -> bytes:
    """Centered banner shown on an empty document, ``~`` kept in column 0."""
    text = f"{APP_TITLE} editor -- version {__version__}"[:width]
    padding = (width - len(text)) // 2
    out = bytearray()
    if padding:
        out += FILLER
        padding -= 1
    out += b" " * padding
    title_len = len(APP_TITLE)
    if len(text) >= title_len:
        out += b"\x1b[1;4m" + text[:title_len].encode("ascii") + b"\x1b[m"
        out += text[title_len:].encode("ascii")
    else:
        out += text.encode("ascii")
    return bytes(out)


def _scroll_percent(cursor_row: int, total_rows: int) -> float:
    if total_rows <= 0:
        return 100.0
    return min(100.0, 100.0 * (cursor_row + 1) / total_rows)


def build_status_line(context: FrameContext) -> bytes:
    """Filename/dirty marker on the left, ``row,col pct%`` flush right."""
    document = context.document
    cursor = context.cursor
    width = context.viewport.screen_cols
    name = str(document.filename) if document.filename is not None else "[No Name]"
    left = f"{name[:MAX_FILENAME_CHARS]} {'[+]' if document.dirty else ''}".rstrip()
    if context.mode_label:
        left = f"{left} {context.mode_label}"

    column = f"{cursor.cx + 1}"
    if context.render_col != cursor.cx:
        column = f"{column}-{context.render_col + 1}"
    percent = _scroll_percent(cursor.cy, document.num_rows)
    right = f"{cursor.cy + 1},{column} {percent:3.0f}%"

    left = left[:width]
    if len(left) + 1 + len(right) <= width:
        line = f"{left}{' ' * (width - len(left) - len(right))}{right}"
    else:
        line = left.ljust(width)
    return b"\x1b[7m" + line.encode("utf-8", errors="replace") + b"\x1b[m"


def build_message_line(context: FrameContext) -> bytes:
    text = context.message.encode("utf-8", errors="replace")
    return ERASE_LINE + text[: context.viewport.screen_cols]


def _text_rows(context: FrameContext) -> list[bytes]:
    document = context.document
    viewport = context.viewport
    rows: list[bytes] = []
    for y in range(viewport.screen_rows):
        file_row = y + viewport.row_offset
        if file_row < document.num_rows:
            render = document.rows[file_row].render
            rows.append(render[viewport.col_offset : viewport.col_offset + viewport.screen_cols])
        elif document.num_rows == 0 and y == viewport.screen_rows // 3:
            rows.append(welcome_banner(viewport.screen_cols))
        else:
            rows.append(FILLER)
    return rows


def build_frame(context: FrameContext) -> bytes:
    """Compose the full frame for ``context`` as a single byte string.

    ``context.viewport`` must already bracket the cursor (see
    ``scroll_to_cursor``).
    """
    viewport = context.viewport
    out: list[bytes] = [HIDE_CURSOR, CURSOR_HOME]
    for row in _text_rows(context):
        out.append(row)
        out.append(ERASE_LINE)
        out.append(LINE_END)
    out.append(build_status_line(context))
    out.append(LINE_END)
    out.append(build_message_line(context))
    screen_y = context.cursor.cy - viewport.row_offset + 1
    screen_x = context.render_col - viewport.col_offset + 1
    out.append(f"\x1b[{screen_y};{screen_x}H".encode("ascii"))
    out.append(SHOW_CURSOR)
    return b"".join(out)
