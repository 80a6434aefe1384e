"""Incremental search over document rows.

Builds a cyclic cache of match positions as the query is typed and keeps the
cursor/viewport snapshot needed to undo a cancelled search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .document import Cursor, Document
from .render.viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    column: int
    row: int
    row_offset: int


def find_matches(document: Document, query: bytes) -> list[Match]:
    """Collect every non-overlapping ``query`` occurrence in document order."""
    if not query:
        return []
    matches: list[Match] = []
    for row_idx, row in enumerate(document.rows):
        start = row.text.find(query)
        while start != -1:
            matches.append(Match(column=start, row=row_idx, row_offset=row_idx))
            start = row.text.find(query, start + len(query))
    return matches


@dataclass
class SearchEngine:
    forward: bool = True
    query: bytes = b""
    matches: list[Match] = field(default_factory=list)
    index: int = 0
    saved_cursor: Cursor | None = None
    saved_viewport: Viewport | None = None

    @property
    def active(self) -> bool:
        """Whether a query is being typed (a snapshot is held for cancel)."""
        return self.saved_cursor is not None

    @property
    def has_matches(self) -> bool:
        return bool(self.matches)

    def begin(self, cursor: Cursor, viewport: Viewport, forward: bool) -> None:
        self.saved_cursor = cursor.copy()
        self.saved_viewport = viewport
        self.forward = forward
        self.query = b""
        self.clear()

    def update(self, document: Document, query: bytes) -> Match | None:
        """Rebuild the cache for ``query`` and return the current match.

        The current index starts at the first match on or after the row the
        cursor was on when the search began, wrapping to the first match.
        """
        self.query = bytes(query)
        self.matches = find_matches(document, self.query)
        self.index = 0
        if not self.matches:
            return None
        origin_row = self.saved_cursor.cy if self.saved_cursor is not None else 0
        for idx, match in enumerate(self.matches):
            if match.row >= origin_row:
                self.index = idx
                break
        return self.current()

    def current(self) -> Match | None:
        if not self.matches:
            return None
        return self.matches[self.index]

    def _step(self, delta: int) -> Match | None:
        if not self.matches:
            return None
        self.index = (self.index + delta) % len(self.matches)
        return self.matches[self.index]

    def next(self) -> Match | None:
        return self._step(1 if self.forward else -1)

    def previous(self) -> Match | None:
        return self._step(-1 if self.forward else 1)

    def commit(self) -> None:
        """Keep the cache for ``n``/``N`` and forget the cancel snapshot."""
        logger.debug("search committed: %r (%d matches)", self.query, len(self.matches))
        self.saved_cursor = None
        self.saved_viewport = None

    def snapshot(self) -> tuple[Cursor, Viewport] | None:
        if self.saved_cursor is None or self.saved_viewport is None:
            return None
        return self.saved_cursor, self.saved_viewport

    def cancel(self) -> tuple[Cursor, Viewport] | None:
        """Drop the cache and hand back the snapshot taken by ``begin``."""
        saved = self.snapshot()
        self.saved_cursor = None
        self.saved_viewport = None
        self.clear()
        return saved

    def clear(self) -> None:
        self.matches = []
        self.index = 0

    def position_label(self) -> str:
        if not self.matches:
            return ""
        return f"[{self.index + 1}/{len(self.matches)}]"
