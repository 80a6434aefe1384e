"""Terminal control helpers for the editor session.

Owns raw-mode lifecycle, alternate-screen switching, and window-size queries.
Every syscall failure surfaces as ``TerminalError`` so callers can abort cleanly.
"""

from __future__ import annotations

import contextlib
import os
import re
import select
import termios
import tty
from collections.abc import Callable

CLEAR_SCREEN = b"\x1b[2J\x1b[H"
_CURSOR_REPORT_RE = re.compile(rb"\x1b\[(\d+);(\d+)R")
_CURSOR_REPORT_TIMEOUT_S = 0.5


class TerminalError(Exception):
    """Unrecoverable terminal failure, tagged with the operation that failed."""

    def __init__(self, operation: str, cause: OSError | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = cause.strerror if cause is not None and cause.strerror else str(cause or "failed")
        super().__init__(f"{operation}: {detail}")


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalError("tcgetattr", OSError(*exc.args)) from exc

    def enable_raw_mode(self) -> None:
        try:
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        except termios.error as exc:
            raise TerminalError("tcsetattr", OSError(*exc.args)) from exc
        # Enter alternate screen.
        self.write_bytes(b"\x1b[?1049h")

    def restore_mode(self) -> None:
        """Leave the alternate screen and put back the saved tty attributes."""
        # The tty attributes must be restored even when stdout is gone.
        with contextlib.suppress(OSError):
            os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except termios.error as exc:
            raise TerminalError("tcsetattr", OSError(*exc.args)) from exc

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with raw-mode enter/exit calls."""
        self.enable_raw_mode()
        try:
            yield
        finally:
            self.restore_mode()

    def write_bytes(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            try:
                written = os.write(self.stdout_fd, view)
            except InterruptedError:
                continue
            except OSError as exc:
                raise TerminalError("write", exc) from exc
            view = view[written:]

    def clear_screen(self) -> None:
        self.write_bytes(CLEAR_SCREEN)

    def ioctl_window_size(self) -> tuple[int, int] | None:
        """Return ``(rows, cols)`` from the size ioctl, or ``None`` if it has none."""
        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            return None
        if size.columns <= 0 or size.lines <= 0:
            return None
        return size.lines, size.columns

    def query_window_size(self, unread: Callable[[int], None] | None = None) -> tuple[int, int]:
        """Return ``(rows, cols)`` of the terminal.

        Falls back to moving the cursor to the far corner and asking the
        terminal where it ended up when the ioctl reports no size. Keystrokes
        that arrive ahead of the report are handed to ``unread`` in order.
        """
        size = self.ioctl_window_size()
        if size is not None:
            return size
        return self._query_cursor_position(unread)

    def _query_cursor_position(self, unread: Callable[[int], None] | None) -> tuple[int, int]:
        self.write_bytes(b"\x1b[999C\x1b[999B\x1b[6n")
        reply = bytearray()
        while len(reply) < 32:
            ready, _, _ = select.select([self.stdin_fd], [], [], _CURSOR_REPORT_TIMEOUT_S)
            if not ready:
                break
            try:
                chunk = os.read(self.stdin_fd, 1)
            except OSError as exc:
                raise TerminalError("read", exc) from exc
            if not chunk:
                break
            reply += chunk
            if chunk == b"R" and _CURSOR_REPORT_RE.search(reply):
                break
        match = _CURSOR_REPORT_RE.search(bytes(reply))
        stray = reply if match is None else reply[: match.start()]
        if unread is not None:
            for byte in stray:
                unread(byte)
        if match is None:
            raise TerminalError("getWindowSize")
        return int(match.group(1)), int(match.group(2))
