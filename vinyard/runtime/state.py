from __future__ import annotations

import time
from dataclasses import dataclass, field

from ..config import EditorConfig
from ..document import Cursor, Document
from ..input import Mode
from ..render import Viewport
from ..search import SearchEngine
from .prompt import CommandLinePrompt


@dataclass
class StatusMessage:
    text: str = ""
    timestamp: float = 0.0

    def visible(self, now: float, ttl_seconds: float) -> bool:
        return bool(self.text) and now - self.timestamp < ttl_seconds


@dataclass
class EditorState:
    document: Document
    config: EditorConfig = field(default_factory=EditorConfig)
    cursor: Cursor = field(default_factory=Cursor)
    viewport: Viewport = field(default_factory=Viewport)
    mode: Mode = Mode.NORMAL
    search: SearchEngine = field(default_factory=SearchEngine)
    prompt: CommandLinePrompt | None = None
    status: StatusMessage = field(default_factory=StatusMessage)
    quit_times_left: int = 0

    def __post_init__(self) -> None:
        if self.quit_times_left <= 0:
            self.quit_times_left = self.config.quit_times

    def set_status(self, text: str, now: float | None = None) -> None:
        self.status = StatusMessage(text, time.monotonic() if now is None else now)

    def message_text(self, now: float) -> str:
        """Prompt text while a prompt is open, else the unexpired status message."""
        if self.prompt is not None:
            return self.prompt.label()
        if self.status.visible(now, self.config.message_ttl_seconds):
            return self.status.text
        return ""

    def mode_label(self) -> str:
        if self.mode is Mode.INSERT:
            return "-- INSERT --"
        return ""
