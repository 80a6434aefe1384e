"""File store: load documents as byte lines and write them back."""

from __future__ import annotations

import os
from pathlib import Path

FILE_MODE = 0o644


def read_lines(path: Path) -> list[bytes]:
    """Read ``path`` and split it into lines without ``\\r``/``\\n`` terminators."""
    data = path.read_bytes()
    lines = data.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()
    return [line.rstrip(b"\r\n") for line in lines]


def write_all(path: Path, data: bytes) -> int:
    """Replace the contents of ``path`` with ``data`` and return bytes written.

    The file is truncated to the new length before writing, so a failed write
    never leaves it longer than the new contents. Raises ``OSError``.
    """
    fd = os.open(path, os.O_RDWR | os.O_CREAT, FILE_MODE)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        written = 0
        while written < len(data):
            count = os.write(fd, view[written:])
            if count <= 0:
                raise OSError(f"short write to {path}")
            written += count
    finally:
        os.close(fd)
    return written
