"""Editor modes and the semantic actions the key decoder produces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Mode(Enum):
    NORMAL = "normal"
    INSERT = "insert"
    COMMAND_LINE = "command_line"


class ActionKind(Enum):
    QUIT = "quit"
    SAVE = "save"
    CLEAR_SEARCH = "clear_search"
    LEADER_NOOP = "leader_noop"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    LINE_START = "line_start"
    FIRST_NON_BLANK = "first_non_blank"
    LINE_END = "line_end"
    NEXT_LINE_START = "next_line_start"
    HALF_PAGE_UP = "half_page_up"
    HALF_PAGE_DOWN = "half_page_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ENTER_INSERT = "enter_insert"
    ENTER_SEARCH = "enter_search"
    NEXT_MATCH = "next_match"
    PREV_MATCH = "prev_match"
    NEWLINE = "newline"
    DELETE_BACK = "delete_back"
    COMMIT_LINE = "commit_line"
    CANCEL_LINE = "cancel_line"
    ERASE = "erase"
    MODE_BREAK = "mode_break"
    ESCAPE = "escape"
    REDRAW = "redraw"
    LITERAL = "literal"


@dataclass(frozen=True)
class Action:
    """One decoded keystroke.

    ``byte`` is only set for ``LITERAL``; ``forward`` only matters for
    ``ENTER_SEARCH``.
    """

    kind: ActionKind
    byte: int | None = None
    forward: bool = True

    @classmethod
    def literal(cls, byte: int) -> Action:
        return cls(ActionKind.LITERAL, byte=byte)

    @classmethod
    def search(cls, forward: bool) -> Action:
        return cls(ActionKind.ENTER_SEARCH, forward=forward)
