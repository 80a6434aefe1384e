"""Low-level byte source over the terminal input descriptor.

Reads at most one byte per call with a bounded wait, and lets the decoder
push back bytes it peeked at but does not own.
"""

from __future__ import annotations

import os
import select

from ..terminal import TerminalError


class ByteReader:
    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[int] = []

    def unread(self, byte: int) -> None:
        """Queue ``byte`` ahead of fd input; queued bytes come back in FIFO order."""
        self._pending.append(byte)

    def read_byte(self, timeout_ms: int | None = None) -> int | None:
        """Return the next byte, or ``None`` if nothing arrives in time.

        ``timeout_ms=None`` blocks until a byte is available. Read failures
        are raised as ``TerminalError``.
        """
        if self._pending:
            return self._pending.pop(0)
        try:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return None
            chunk = os.read(self.fd, 1)
        except InterruptedError:
            return None
        except OSError as exc:
            raise TerminalError("read", exc) from exc
        if not chunk:
            return None
        return chunk[0]
