"""Mode-sensitive translation of raw input bytes into editor actions.

The decoder only classifies bytes: it reads follow-up bytes for escape and
leader sequences but never touches buffer, cursor, or mode state.
"""

from __future__ import annotations

from typing import Protocol

from .actions import Action, ActionKind, Mode

ESC = 0x1B
LEADER = 0x20
ENTER = 0x0D
BACKSPACE = 0x7F
CTRL_H = 0x08

ESC_SEQUENCE_TIMEOUT_MS = 100
LEADER_TIMEOUT_MS = 1000
POLL_TIMEOUT_MS = 100


def ctrl_key(ch: str) -> int:
    return ord(ch) & 0x1F


LEADER_ACTIONS: dict[int, ActionKind] = {
    ord("q"): ActionKind.QUIT,
    ord("w"): ActionKind.SAVE,
    ord("c"): ActionKind.CLEAR_SEARCH,
}

NORMAL_ACTIONS: dict[int, Action] = {
    ord("h"): Action(ActionKind.MOVE_LEFT),
    BACKSPACE: Action(ActionKind.MOVE_LEFT),
    CTRL_H: Action(ActionKind.MOVE_LEFT),
    ord("j"): Action(ActionKind.MOVE_DOWN),
    ord("k"): Action(ActionKind.MOVE_UP),
    ord("l"): Action(ActionKind.MOVE_RIGHT),
    ord("0"): Action(ActionKind.LINE_START),
    ord("^"): Action(ActionKind.FIRST_NON_BLANK),
    ord("$"): Action(ActionKind.LINE_END),
    ENTER: Action(ActionKind.NEXT_LINE_START),
    ctrl_key("U"): Action(ActionKind.HALF_PAGE_UP),
    ctrl_key("D"): Action(ActionKind.HALF_PAGE_DOWN),
    ctrl_key("B"): Action(ActionKind.PAGE_UP),
    ctrl_key("F"): Action(ActionKind.PAGE_DOWN),
    ctrl_key("L"): Action(ActionKind.REDRAW),
    ord("/"): Action.search(forward=True),
    ord("?"): Action.search(forward=False),
    ord("n"): Action(ActionKind.NEXT_MATCH),
    ord("N"): Action(ActionKind.PREV_MATCH),
    ord("i"): Action(ActionKind.ENTER_INSERT),
}

INSERT_ACTIONS: dict[int, Action] = {
    ENTER: Action(ActionKind.NEWLINE),
    BACKSPACE: Action(ActionKind.DELETE_BACK),
    CTRL_H: Action(ActionKind.DELETE_BACK),
}

COMMAND_LINE_ACTIONS: dict[int, Action] = {
    ENTER: Action(ActionKind.COMMIT_LINE),
    BACKSPACE: Action(ActionKind.ERASE),
    CTRL_H: Action(ActionKind.ERASE),
}

# ESC [ <final> cursor keys.
ARROW_ACTIONS: dict[int, Action] = {
    ord("A"): Action(ActionKind.MOVE_UP),
    ord("B"): Action(ActionKind.MOVE_DOWN),
    ord("C"): Action(ActionKind.MOVE_RIGHT),
    ord("D"): Action(ActionKind.MOVE_LEFT),
}


class ByteSource(Protocol):
    def read_byte(self, timeout_ms: int | None = None) -> int | None: ...

    def unread(self, byte: int) -> None: ...


def _lone_escape(mode: Mode) -> Action:
    if mode is Mode.INSERT:
        return Action(ActionKind.MODE_BREAK)
    if mode is Mode.COMMAND_LINE:
        return Action(ActionKind.CANCEL_LINE)
    return Action(ActionKind.ESCAPE)


def _decode_escape(mode: Mode, source: ByteSource, escape_timeout_ms: int) -> Action:
    follow = source.read_byte(escape_timeout_ms)
    if follow is None:
        return _lone_escape(mode)
    if mode is Mode.COMMAND_LINE:
        source.unread(follow)
        return Action(ActionKind.CANCEL_LINE)
    if follow != ord("["):
        source.unread(follow)
        return Action(ActionKind.ESCAPE)
    # Consume parameter and intermediate bytes up to the CSI final byte.
    params = bytearray()
    final = source.read_byte(escape_timeout_ms)
    while final is not None and 0x20 <= final < 0x40:
        params.append(final)
        final = source.read_byte(escape_timeout_ms)
    if final is None:
        return Action(ActionKind.ESCAPE)
    if not 0x40 <= final <= 0x7E:
        source.unread(final)
        return Action(ActionKind.ESCAPE)
    if params:
        return Action(ActionKind.ESCAPE)
    return ARROW_ACTIONS.get(final, Action(ActionKind.ESCAPE))


def _decode_leader(source: ByteSource, leader_timeout_ms: int) -> Action:
    command = source.read_byte(leader_timeout_ms)
    if command is None:
        return Action(ActionKind.LEADER_NOOP)
    return Action(LEADER_ACTIONS.get(command, ActionKind.LEADER_NOOP))


def decode_action(
    mode: Mode,
    source: ByteSource,
    *,
    poll_timeout_ms: int | None = POLL_TIMEOUT_MS,
    escape_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS,
    leader_timeout_ms: int = LEADER_TIMEOUT_MS,
) -> Action | None:
    """Read one keystroke from ``source`` and classify it for ``mode``.

    Returns ``None`` when no byte arrived within ``poll_timeout_ms`` so the
    caller can re-render and poll again.
    """
    byte = source.read_byte(poll_timeout_ms)
    if byte is None:
        return None

    if byte == ESC:
        return _decode_escape(mode, source, escape_timeout_ms)

    if mode is Mode.NORMAL:
        if byte == LEADER:
            return _decode_leader(source, leader_timeout_ms)
        return NORMAL_ACTIONS.get(byte, Action.literal(byte))
    if mode is Mode.INSERT:
        return INSERT_ACTIONS.get(byte, Action.literal(byte))
    return COMMAND_LINE_ACTIONS.get(byte, Action.literal(byte))
