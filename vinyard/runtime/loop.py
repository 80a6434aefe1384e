"""Main interactive event loop for the editor.

Alternates render, one bounded key read, and dispatch until a quit action
returns an exit code. Frames identical to the last one written are skipped.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from ..input import ActionKind, ByteSource, decode_action
from ..render import FrameContext, build_frame, scroll_to_cursor
from ..terminal import TerminalController
from .controller import EditorController
from .state import EditorState


def compose_frame(state: EditorState, now: float) -> bytes:
    """Scroll the viewport onto the cursor and build the frame for ``state``."""
    render_col = state.document.render_column(state.cursor.cy, state.cursor.cx)
    state.viewport = scroll_to_cursor(state.viewport, state.cursor.cy, render_col)
    context = FrameContext(
        document=state.document,
        cursor=state.cursor,
        viewport=state.viewport,
        mode_label=state.mode_label(),
        message=state.message_text(now),
    )
    return build_frame(context)


def run_main_loop(
    state: EditorState,
    terminal: TerminalController,
    source: ByteSource,
    controller: EditorController,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Run until a quit action occurs and return its exit code."""
    config = state.config
    last_frame: bytes | None = None
    # The cursor-report fallback runs once; later polls only trust the ioctl.
    size = terminal.query_window_size(source.unread)
    while True:
        size = terminal.ioctl_window_size() or size
        rows, cols = size
        state.viewport = state.viewport.resized(rows, cols)
        frame = compose_frame(state, clock())
        if frame != last_frame:
            terminal.write_bytes(frame)
            last_frame = frame

        action = decode_action(
            state.mode,
            source,
            poll_timeout_ms=config.poll_timeout_ms,
            escape_timeout_ms=config.escape_timeout_ms,
            leader_timeout_ms=config.leader_timeout_ms,
        )
        if action is None:
            continue
        if action.kind is ActionKind.REDRAW:
            last_frame = None
        exit_code = controller.dispatch(action)
        if exit_code is not None:
            return exit_code
