"""Action dispatch for the editor.

Routes decoded actions to the line buffer, search engine, prompt, or mode
transitions. This is the only place editor state is mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from ..document import Cursor
from ..files import write_all
from ..input import Action, ActionKind, Mode
from ..render import Viewport
from ..search import Match
from .bindings import ActionBinding, ActionRegistry
from .prompt import CommandLinePrompt, PromptKind
from .state import EditorState

logger = logging.getLogger(__name__)

EXIT_OK = 0
_TAB = 0x09

_MOVES = (
    ActionKind.MOVE_LEFT,
    ActionKind.MOVE_RIGHT,
    ActionKind.MOVE_UP,
    ActionKind.MOVE_DOWN,
)


def _is_insertable(byte: int) -> bool:
    return byte == _TAB or 0x20 <= byte < 0x7F


class EditorController:
    def __init__(
        self,
        state: EditorState,
        write_file: Callable[[Path, bytes], int] = write_all,
    ) -> None:
        self.state = state
        self._write_file = write_file
        self._registries = {
            Mode.NORMAL: self._normal_registry(),
            Mode.INSERT: self._insert_registry(),
            Mode.COMMAND_LINE: self._command_line_registry(),
        }

    def _normal_registry(self) -> ActionRegistry:
        return ActionRegistry().register_bindings(
            ActionBinding((ActionKind.QUIT,), lambda _action: self.quit()),
            ActionBinding((ActionKind.SAVE,), lambda _action: self.save()),
            ActionBinding((ActionKind.CLEAR_SEARCH,), lambda _action: self.clear_search()),
            ActionBinding(_MOVES, lambda action: self.move_cursor(action.kind)),
            ActionBinding((ActionKind.LINE_START,), lambda _action: self._set_column(0)),
            ActionBinding((ActionKind.FIRST_NON_BLANK,), lambda _action: self.go_to_first_non_blank()),
            ActionBinding((ActionKind.LINE_END,), lambda _action: self.go_to_line_end()),
            ActionBinding((ActionKind.NEXT_LINE_START,), lambda _action: self.go_to_next_line_start()),
            ActionBinding((ActionKind.HALF_PAGE_UP, ActionKind.HALF_PAGE_DOWN), self._half_page),
            ActionBinding((ActionKind.PAGE_UP, ActionKind.PAGE_DOWN), self._page),
            ActionBinding((ActionKind.ENTER_INSERT,), lambda _action: self.set_mode(Mode.INSERT)),
            ActionBinding((ActionKind.ENTER_SEARCH,), lambda action: self.begin_search(action.forward)),
            ActionBinding((ActionKind.NEXT_MATCH,), lambda _action: self.step_match(forward=True)),
            ActionBinding((ActionKind.PREV_MATCH,), lambda _action: self.step_match(forward=False)),
        )

    def _insert_registry(self) -> ActionRegistry:
        return ActionRegistry().register_bindings(
            ActionBinding((ActionKind.MODE_BREAK,), lambda _action: self.set_mode(Mode.NORMAL)),
            ActionBinding(_MOVES, lambda action: self.move_cursor(action.kind)),
            ActionBinding((ActionKind.NEWLINE,), lambda _action: self.insert_newline()),
            ActionBinding((ActionKind.DELETE_BACK,), lambda _action: self.delete_back()),
            ActionBinding((ActionKind.LITERAL,), self._insert_literal),
        )

    def _command_line_registry(self) -> ActionRegistry:
        return ActionRegistry().register_bindings(
            ActionBinding((ActionKind.COMMIT_LINE,), lambda _action: self.commit_prompt()),
            ActionBinding((ActionKind.CANCEL_LINE,), lambda _action: self.cancel_prompt()),
            ActionBinding((ActionKind.ERASE,), self._prompt_erase),
            ActionBinding((ActionKind.LITERAL,), self._prompt_literal),
        )

    def dispatch(self, action: Action) -> int | None:
        """Apply ``action`` for the current mode; returns an exit code on quit."""
        state = self.state
        if action.kind is not ActionKind.QUIT:
            state.quit_times_left = state.config.quit_times
        result = self._registries[state.mode].dispatch(action)
        state.cursor.clamp(state.document)
        return result

    # Mode and quit.

    def set_mode(self, mode: Mode) -> None:
        if self.state.mode is not mode:
            logger.debug("mode %s -> %s", self.state.mode.value, mode.value)
        self.state.mode = mode

    def quit(self) -> int | None:
        """Quit, requiring ``quit_times`` consecutive requests when dirty."""
        state = self.state
        if state.document.dirty:
            state.quit_times_left -= 1
            if state.quit_times_left > 0:
                remaining = state.quit_times_left
                plural = "" if remaining == 1 else "s"
                state.set_status(f"Warning: unsaved changes. Quit {remaining} more time{plural} to exit.")
                return None
        return EXIT_OK

    # Motions.

    def move_cursor(self, kind: ActionKind) -> None:
        cursor = self.state.cursor
        document = self.state.document
        if kind is ActionKind.MOVE_LEFT:
            if cursor.cx > 0:
                cursor.cx -= 1
        elif kind is ActionKind.MOVE_RIGHT:
            if cursor.cy < document.num_rows and cursor.cx < document.row_length(cursor.cy):
                cursor.cx += 1
        elif kind is ActionKind.MOVE_UP:
            if cursor.cy > 0:
                cursor.cy -= 1
        elif kind is ActionKind.MOVE_DOWN:
            if cursor.cy < document.num_rows:
                cursor.cy += 1
        cursor.cx = min(cursor.cx, document.row_length(cursor.cy))

    def _set_column(self, cx: int) -> None:
        self.state.cursor.cx = cx

    def go_to_first_non_blank(self) -> None:
        self.state.cursor.cx = self.state.document.first_non_blank(self.state.cursor.cy)

    def go_to_line_end(self) -> None:
        self.state.cursor.cx = self.state.document.row_length(self.state.cursor.cy)

    def go_to_next_line_start(self) -> None:
        self.move_cursor(ActionKind.MOVE_DOWN)
        self.go_to_first_non_blank()

    def _repeat_move(self, kind: ActionKind, times: int) -> None:
        for _ in range(times):
            self.move_cursor(kind)

    def _half_page(self, action: Action) -> None:
        kind = ActionKind.MOVE_UP if action.kind is ActionKind.HALF_PAGE_UP else ActionKind.MOVE_DOWN
        self._repeat_move(kind, self.state.viewport.screen_rows // 2)

    def _page(self, action: Action) -> None:
        """Jump to the top/bottom visible row, then move a full screen further."""
        state = self.state
        viewport = state.viewport
        if action.kind is ActionKind.PAGE_UP:
            state.cursor.cy = viewport.row_offset
            kind = ActionKind.MOVE_UP
        else:
            state.cursor.cy = min(viewport.row_offset + viewport.screen_rows - 1, state.document.num_rows)
            kind = ActionKind.MOVE_DOWN
        self._repeat_move(kind, viewport.screen_rows)

    # Editing.

    def _insert_literal(self, action: Action) -> None:
        if action.byte is None or not _is_insertable(action.byte):
            return
        self.insert_char(action.byte)

    def insert_char(self, byte: int) -> None:
        state = self.state
        document = state.document
        if state.cursor.cy == document.num_rows:
            document.insert_row(document.num_rows, b"")
        state.cursor.cx += document.insert_char(state.cursor.cy, state.cursor.cx, byte)

    def insert_newline(self) -> None:
        state = self.state
        cursor = state.cursor
        if cursor.cx == 0:
            state.document.insert_row(cursor.cy, b"")
        else:
            state.document.split_row(cursor.cy, cursor.cx)
        cursor.cy += 1
        cursor.cx = 0

    def delete_back(self) -> None:
        """Backspace: delete before the cursor, joining with the previous row at column 0."""
        state = self.state
        document = state.document
        cursor = state.cursor
        if cursor.cy == document.num_rows:
            return
        if cursor.cx == 0 and cursor.cy == 0:
            return
        if cursor.cx > 0:
            cursor.cx -= document.delete_char(cursor.cy, cursor.cx)
            return
        previous = cursor.cy - 1
        cursor.cx = document.row_length(previous)
        document.append_row_content(previous, bytes(document.rows[cursor.cy].text))
        document.delete_row(cursor.cy)
        cursor.cy = previous

    # Saving.

    def save(self) -> None:
        if self.state.document.filename is None:
            self.open_prompt(CommandLinePrompt(PromptKind.SAVE))
            return
        self.write_document()

    def write_document(self) -> bool:
        """Write the document to its filename; failures leave it dirty."""
        state = self.state
        document = state.document
        assert document.filename is not None
        data, length = document.to_serialized_bytes()
        try:
            self._write_file(document.filename, data)
        except OSError as exc:
            logger.warning("save to %s failed: %s", document.filename, exc)
            state.set_status(f"Can't save! I/O error: {exc.strerror or exc}")
            return False
        document.mark_clean()
        logger.info("wrote %d bytes to %s", length, document.filename)
        state.set_status(f'"{document.filename}" {document.num_rows}L, {length}B written')
        return True

    # Prompt and search.

    def open_prompt(self, prompt: CommandLinePrompt) -> None:
        self.state.prompt = prompt
        self.set_mode(Mode.COMMAND_LINE)

    def close_prompt(self) -> None:
        self.state.prompt = None
        self.set_mode(Mode.NORMAL)

    def _prompt_literal(self, action: Action) -> None:
        prompt = self.state.prompt
        if prompt is None or action.byte is None:
            return
        if prompt.push(action.byte) and prompt.kind is PromptKind.SEARCH:
            self._run_incremental_search()

    def _prompt_erase(self, _action: Action) -> None:
        prompt = self.state.prompt
        if prompt is None:
            return
        if prompt.erase() and prompt.kind is PromptKind.SEARCH:
            self._run_incremental_search()

    def commit_prompt(self) -> None:
        state = self.state
        prompt = state.prompt
        if prompt is None:
            self.set_mode(Mode.NORMAL)
            return
        if not prompt.buffer:
            self.cancel_prompt()
            return
        if prompt.kind is PromptKind.SAVE:
            self.close_prompt()
            previous = state.document.filename
            state.document.filename = Path(prompt.text.decode("utf-8", errors="replace"))
            if not self.write_document():
                state.document.filename = previous
            return
        self.close_prompt()
        state.search.commit()
        if state.search.has_matches:
            state.set_status(self._search_label())
        else:
            state.set_status(f"Pattern not found: {prompt.text.decode('utf-8', errors='replace')}")

    def cancel_prompt(self) -> None:
        state = self.state
        prompt = state.prompt
        self.close_prompt()
        if prompt is None:
            return
        if prompt.kind is PromptKind.SAVE:
            state.set_status("Save aborted")
            return
        self._restore_view(state.search.cancel())
        state.set_status("")

    def begin_search(self, forward: bool) -> None:
        state = self.state
        state.search.begin(state.cursor, state.viewport, forward)
        self.open_prompt(CommandLinePrompt(PromptKind.SEARCH, forward=forward))

    def _run_incremental_search(self) -> None:
        state = self.state
        assert state.prompt is not None
        match = state.search.update(state.document, state.prompt.text)
        if match is None:
            self._restore_view(state.search.snapshot())
            return
        self._jump_to(match)

    def _restore_view(self, saved: tuple[Cursor, Viewport] | None) -> None:
        if saved is None:
            return
        cursor, viewport = saved
        self.state.cursor = cursor.copy()
        self.state.viewport = viewport

    def _jump_to(self, match: Match) -> None:
        state = self.state
        state.cursor.cx = match.column
        state.cursor.cy = match.row
        state.viewport = replace(state.viewport, row_offset=match.row_offset)
        state.cursor.clamp(state.document)

    def step_match(self, forward: bool) -> None:
        search = self.state.search
        if not search.has_matches:
            return
        match = search.next() if forward else search.previous()
        if match is not None:
            self._jump_to(match)
            self.state.set_status(self._search_label())

    def _search_label(self) -> str:
        search = self.state.search
        prefix = "/" if search.forward else "?"
        return f"{prefix}{search.query.decode('utf-8', errors='replace')} {search.position_label()}"

    def clear_search(self) -> None:
        self.state.search.clear()
