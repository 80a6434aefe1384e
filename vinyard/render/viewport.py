"""Viewport geometry and scroll clamping."""

from __future__ import annotations

from dataclasses import dataclass, replace

# Status bar and message bar sit under the text rows.
RESERVED_ROWS = 2


@dataclass(frozen=True)
class Viewport:
    row_offset: int = 0
    col_offset: int = 0
    screen_rows: int = 1
    screen_cols: int = 1

    @classmethod
    def for_terminal(cls, term_rows: int, term_cols: int) -> Viewport:
        """Size a viewport for a terminal of ``term_rows`` x ``term_cols`` cells."""
        return cls(screen_rows=max(1, term_rows - RESERVED_ROWS), screen_cols=max(1, term_cols))

    def resized(self, term_rows: int, term_cols: int) -> Viewport:
        sized = Viewport.for_terminal(term_rows, term_cols)
        return replace(self, screen_rows=sized.screen_rows, screen_cols=sized.screen_cols)


def scroll_to_cursor(viewport: Viewport, cursor_row: int, render_col: int) -> Viewport:
    """Return ``viewport`` with offsets moved just enough to bracket the cursor.

    The cursor ends up in ``[row_offset, row_offset + screen_rows)`` and
    ``[col_offset, col_offset + screen_cols)``.
    """
    row_offset = viewport.row_offset
    col_offset = viewport.col_offset
    if cursor_row < row_offset:
        row_offset = cursor_row
    if cursor_row >= row_offset + viewport.screen_rows:
        row_offset = cursor_row - viewport.screen_rows + 1
    if render_col < col_offset:
        col_offset = render_col
    if render_col >= col_offset + viewport.screen_cols:
        col_offset = render_col - viewport.screen_cols + 1
    if row_offset == viewport.row_offset and col_offset == viewport.col_offset:
        return viewport
    return replace(viewport, row_offset=row_offset, col_offset=col_offset)
