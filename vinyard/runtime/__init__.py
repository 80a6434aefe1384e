"""Runtime package: editor state, action dispatch, and the main loop."""

from .app import HELP_MESSAGE, open_document, run_editor
from .controller import EditorController
from .state import EditorState, StatusMessage

__all__ = [
    "HELP_MESSAGE",
    "EditorController",
    "EditorState",
    "StatusMessage",
    "open_document",
    "run_editor",
]
