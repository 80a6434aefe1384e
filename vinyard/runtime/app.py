"""Editor bootstrap: load the document, own the terminal, run the loop."""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path

from ..config import EditorConfig
from ..document import Document
from ..files import read_lines
from ..input import ByteReader
from ..terminal import TerminalController, TerminalError
from .controller import EditorController
from .loop import run_main_loop
from .state import EditorState

logger = logging.getLogger(__name__)

HELP_MESSAGE = "HELP: <space>q = quit | <space>w = save | / = search"


def open_document(path: Path | None, tab_stop: int) -> Document:
    """Load ``path`` into a document; a missing file yields an empty named one.

    Other ``OSError`` failures (directories, permissions) propagate.
    """
    if path is None:
        return Document(tab_stop=tab_stop)
    try:
        lines = read_lines(path)
    except FileNotFoundError:
        logger.info("%s does not exist yet, starting empty", path)
        return Document(filename=path, tab_stop=tab_stop)
    logger.info("loaded %d lines from %s", len(lines), path)
    return Document.from_lines(lines, filename=path, tab_stop=tab_stop)


def startup_message(document: Document) -> str:
    """Initial status text: ``[New]`` for a file not yet on disk, else help."""
    if document.filename is not None and not document.filename.exists():
        return f'"{document.filename}" [New]'
    return HELP_MESSAGE


def run_editor(
    document: Document,
    config: EditorConfig,
    stdin_fd: int,
    stdout_fd: int,
) -> int:
    """Run the interactive editor on ``document`` and return the exit code.

    Raises ``TerminalError`` on unrecoverable terminal failures, after the
    screen has been cleared and the tty restored.
    """
    state = EditorState(document=document, config=config)
    state.set_status(startup_message(document))
    terminal = TerminalController(stdin_fd, stdout_fd)
    controller = EditorController(state)
    with terminal.raw_mode():
        try:
            return run_main_loop(state, terminal, ByteReader(stdin_fd), controller)
        except TerminalError as exc:
            logger.error("terminal failure: %s", exc)
            raise
        finally:
            with contextlib.suppress(TerminalError):
                terminal.clear_screen()
