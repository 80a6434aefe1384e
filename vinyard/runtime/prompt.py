"""Command-line prompt state (save-as filename or search query)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PromptKind(Enum):
    SAVE = "save"
    SEARCH = "search"


@dataclass
class CommandLinePrompt:
    kind: PromptKind
    forward: bool = True
    buffer: bytearray = field(default_factory=bytearray)

    @property
    def prefix(self) -> str:
        if self.kind is PromptKind.SAVE:
            return "Save as: "
        return "/" if self.forward else "?"

    @property
    def text(self) -> bytes:
        return bytes(self.buffer)

    def label(self) -> str:
        return self.prefix + self.text.decode("utf-8", errors="replace")

    def push(self, byte: int) -> bool:
        """Append a printable ASCII byte; control bytes are rejected."""
        if not 0x20 <= byte < 0x7F:
            return False
        self.buffer.append(byte)
        return True

    def erase(self) -> bool:
        if not self.buffer:
            return False
        self.buffer.pop()
        return True
