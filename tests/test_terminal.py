"""Tests for terminal raw-mode lifecycle and window-size queries.

Verifies alternate-screen sequences, tty restoration on every exit path,
and the cursor-report fallback used when the size ioctl reports nothing.
"""

from __future__ import annotations

import os
import termios
import unittest
from unittest import mock

from vinyard.input import ByteReader
from vinyard.terminal import CLEAR_SCREEN, TerminalController, TerminalError


def _controller() -> TerminalController:
    with mock.patch("vinyard.terminal.termios.tcgetattr", return_value=[0]):
        return TerminalController(stdin_fd=0, stdout_fd=1)


class TerminalModeTests(unittest.TestCase):
    def test_enable_and_restore_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("vinyard.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "vinyard.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("vinyard.terminal.os.write", side_effect=lambda _fd, data: len(data)) as write_mock, mock.patch(
            "vinyard.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_raw_mode()
            controller.restore_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(bytes(write_mock.call_args_list[0].args[1]), b"\x1b[?1049h")
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_tcgetattr_failure_raises_terminal_error(self) -> None:
        with mock.patch("vinyard.terminal.termios.tcgetattr", side_effect=termios.error(25, "Inappropriate ioctl")):
            with self.assertRaises(TerminalError) as ctx:
                TerminalController(stdin_fd=0, stdout_fd=1)
        self.assertEqual(ctx.exception.operation, "tcgetattr")
        self.assertEqual(str(ctx.exception), "tcgetattr: Inappropriate ioctl")

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        controller = _controller()

        with mock.patch.object(controller, "enable_raw_mode") as enable_mock, mock.patch.object(
            controller, "restore_mode"
        ) as restore_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        restore_mock.assert_called_once()

    def test_restore_still_resets_tty_when_stdout_is_gone(self) -> None:
        controller = _controller()
        with mock.patch("vinyard.terminal.os.write", side_effect=BrokenPipeError(32, "Broken pipe")), mock.patch(
            "vinyard.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller.restore_mode()
        setattr_mock.assert_called_once()


class TerminalWriteTests(unittest.TestCase):
    def test_write_bytes_loops_over_partial_writes(self) -> None:
        controller = _controller()
        chunks: list[bytes] = []

        def short_write(_fd: int, data) -> int:
            chunks.append(bytes(data[:2]))
            return min(2, len(data))

        with mock.patch("vinyard.terminal.os.write", side_effect=short_write):
            controller.write_bytes(b"abcde")

        self.assertEqual(b"".join(chunks), b"abcde")

    def test_write_failure_raises_terminal_error(self) -> None:
        controller = _controller()
        with mock.patch("vinyard.terminal.os.write", side_effect=OSError(5, "Input/output error")):
            with self.assertRaises(TerminalError) as ctx:
                controller.write_bytes(b"x")
        self.assertEqual(str(ctx.exception), "write: Input/output error")

    def test_clear_screen_writes_clear_and_home(self) -> None:
        controller = _controller()
        with mock.patch.object(controller, "write_bytes") as write_mock:
            controller.clear_screen()
        write_mock.assert_called_once_with(CLEAR_SCREEN)


class WindowSizeTests(unittest.TestCase):
    def test_uses_ioctl_size_when_available(self) -> None:
        controller = _controller()
        with mock.patch("vinyard.terminal.os.get_terminal_size", return_value=os.terminal_size((100, 40))):
            self.assertEqual(controller.query_window_size(), (40, 100))

    def test_falls_back_to_cursor_position_report(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"\x1b[52;181R")
            with mock.patch("vinyard.terminal.termios.tcgetattr", return_value=[0]):
                controller = TerminalController(stdin_fd=read_fd, stdout_fd=1)
            with mock.patch(
                "vinyard.terminal.os.get_terminal_size", return_value=os.terminal_size((0, 0))
            ), mock.patch.object(controller, "write_bytes") as write_mock:
                size = controller.query_window_size()
        finally:
            os.close(read_fd)
            os.close(write_fd)

        write_mock.assert_called_once_with(b"\x1b[999C\x1b[999B\x1b[6n")
        self.assertEqual(size, (52, 181))

    def test_ioctl_size_is_none_when_unavailable(self) -> None:
        controller = _controller()
        with mock.patch("vinyard.terminal.os.get_terminal_size", side_effect=OSError(25, "Inappropriate ioctl")):
            self.assertIsNone(controller.ioctl_window_size())
        with mock.patch("vinyard.terminal.os.get_terminal_size", return_value=os.terminal_size((0, 24))):
            self.assertIsNone(controller.ioctl_window_size())

    def test_keystrokes_ahead_of_cursor_report_are_pushed_back(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"jR\x1b[24;80R")
            with mock.patch("vinyard.terminal.termios.tcgetattr", return_value=[0]):
                controller = TerminalController(stdin_fd=read_fd, stdout_fd=1)
            reader = ByteReader(read_fd)
            with mock.patch(
                "vinyard.terminal.os.get_terminal_size", side_effect=OSError(25, "Inappropriate ioctl")
            ), mock.patch.object(controller, "write_bytes"):
                size = controller.query_window_size(reader.unread)
            replayed = [reader.read_byte(timeout_ms=20), reader.read_byte(timeout_ms=20), reader.read_byte(timeout_ms=20)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(size, (24, 80))
        self.assertEqual(replayed, [ord("j"), ord("R"), None])

    def test_fallback_without_reply_raises(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            with mock.patch("vinyard.terminal.termios.tcgetattr", return_value=[0]):
                controller = TerminalController(stdin_fd=read_fd, stdout_fd=1)
            with mock.patch(
                "vinyard.terminal.os.get_terminal_size", side_effect=OSError(25, "Inappropriate ioctl")
            ), mock.patch.object(controller, "write_bytes"), mock.patch(
                "vinyard.terminal._CURSOR_REPORT_TIMEOUT_S", 0.01
            ):
                with self.assertRaises(TerminalError) as ctx:
                    controller.query_window_size()
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(ctx.exception.operation, "getWindowSize")


if __name__ == "__main__":
    unittest.main()
