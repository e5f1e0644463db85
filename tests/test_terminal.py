"""Tests for raw-mode lifecycle and terminal control sequences.

Verifies the termios attributes applied, restore-on-exit safety, and the
escape payloads written for the alternate screen, title, and frames.
"""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from tickterm.errors import TerminalModeError
from tickterm.terminal import RawModeSession, TerminalScreen


def _tty_state() -> list:
    cc = [b"\x00"] * 32
    lflag = termios.ECHO | termios.ICANON | termios.ISIG
    return [0, termios.OPOST, 0, lflag, 38400, 38400, cc]


class RawModeSessionTests(unittest.TestCase):
    def test_enter_disables_echo_and_canonical_mode_with_non_blocking_reads(self) -> None:
        saved_state = _tty_state()

        with mock.patch("tickterm.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "tickterm.terminal.termios.tcsetattr"
        ) as setattr_mock, mock.patch("tickterm.terminal.atexit.register") as register_mock:
            session = RawModeSession(0)
            session.enter()

        fd, when, applied = setattr_mock.call_args.args
        self.assertEqual((fd, when), (0, termios.TCSANOW))
        self.assertEqual(applied[3] & (termios.ECHO | termios.ICANON), 0)
        self.assertTrue(applied[3] & termios.ISIG)
        self.assertEqual(applied[1], termios.OPOST)
        self.assertEqual(applied[6][termios.VMIN], 0)
        self.assertEqual(applied[6][termios.VTIME], 0)
        self.assertEqual(saved_state[3], termios.ECHO | termios.ICANON | termios.ISIG)
        register_mock.assert_called_once_with(session._restore_at_exit)
        self.assertTrue(session.active)

    def test_enter_twice_and_restore_twice_touch_the_tty_once_each(self) -> None:
        saved_state = _tty_state()

        with mock.patch("tickterm.terminal.termios.tcgetattr", return_value=saved_state) as getattr_mock, mock.patch(
            "tickterm.terminal.termios.tcsetattr"
        ) as setattr_mock, mock.patch("tickterm.terminal.atexit.register"):
            session = RawModeSession(0)
            session.enter()
            session.enter()
            session.restore()
            session.restore()

        getattr_mock.assert_called_once_with(0)
        self.assertEqual(setattr_mock.call_count, 2)
        self.assertEqual(setattr_mock.call_args_list[1], mock.call(0, termios.TCSANOW, saved_state))
        self.assertFalse(session.active)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        session = RawModeSession(0)

        with mock.patch.object(session, "enter") as enter_mock, mock.patch.object(session, "restore") as restore_mock:
            with self.assertRaises(RuntimeError):
                with session.raw_mode():
                    raise RuntimeError("boom")

        enter_mock.assert_called_once()
        restore_mock.assert_called_once()

    def test_tcgetattr_failure_is_fatal_terminal_mode_error(self) -> None:
        with mock.patch(
            "tickterm.terminal.termios.tcgetattr",
            side_effect=termios.error(25, "Inappropriate ioctl for device"),
        ):
            session = RawModeSession(0)
            with self.assertRaises(TerminalModeError) as ctx:
                session.enter()

        self.assertEqual(ctx.exception.errno, 25)
        self.assertIn("errno 25", str(ctx.exception))
        self.assertFalse(session.active)

    def test_tcsetattr_failure_leaves_session_inactive(self) -> None:
        with mock.patch("tickterm.terminal.termios.tcgetattr", return_value=_tty_state()), mock.patch(
            "tickterm.terminal.termios.tcsetattr", side_effect=termios.error(5, "I/O error")
        ), mock.patch("tickterm.terminal.atexit.register") as register_mock:
            session = RawModeSession(0)
            with self.assertRaises(TerminalModeError):
                session.enter()

        self.assertFalse(session.active)
        register_mock.assert_not_called()

    def test_exit_hook_logs_restore_failure_instead_of_raising(self) -> None:
        with mock.patch("tickterm.terminal.termios.tcgetattr", return_value=_tty_state()), mock.patch(
            "tickterm.terminal.termios.tcsetattr"
        ), mock.patch("tickterm.terminal.atexit.register") as register_mock:
            session = RawModeSession(0)
            session.enter()
        exit_hook = register_mock.call_args.args[0]

        with mock.patch(
            "tickterm.terminal.termios.tcsetattr", side_effect=termios.error(5, "I/O error")
        ), self.assertLogs("tickterm.terminal", level="ERROR") as logs:
            exit_hook()

        self.assertIn("not restored at exit", logs.output[0])
        self.assertFalse(session.active)


class TerminalScreenTests(unittest.TestCase):
    def test_enter_and_leave_use_alternate_screen_sequences(self) -> None:
        with mock.patch("tickterm.terminal.os.write", side_effect=lambda fd, data: len(data)) as write_mock:
            screen = TerminalScreen(1)
            screen.enter()
            screen.enter()
            screen.leave()
            screen.leave()

        self.assertEqual(
            [bytes(call.args[1]) for call in write_mock.call_args_list],
            [b"\x1b[?25l\x1b[?1049h", b"\x1b[0m\x1b[?25h\x1b[?1049l"],
        )

    def test_set_title_strips_control_characters(self) -> None:
        with mock.patch("tickterm.terminal.os.write", side_effect=lambda fd, data: len(data)) as write_mock:
            TerminalScreen(1).set_title("demo\x07\x1b title")

        self.assertEqual(bytes(write_mock.call_args.args[1]), b"\x1b]2;demo title\x07")

    def test_draw_homes_cursor_in_single_write(self) -> None:
        with mock.patch("tickterm.terminal.os.write", side_effect=lambda fd, data: len(data)) as write_mock:
            TerminalScreen(1).draw(memoryview(b"$$$$\n"))

        write_mock.assert_called_once()
        self.assertEqual(bytes(write_mock.call_args.args[1]), b"\x1b[H$$$$\n")

    def test_write_retries_partial_writes(self) -> None:
        chunks: list[bytes] = []

        def short_write(fd: int, data) -> int:
            chunk = bytes(data[:3])
            chunks.append(chunk)
            return len(chunk)

        with mock.patch("tickterm.terminal.os.write", side_effect=short_write):
            TerminalScreen(1).write(b"abcdefgh")

        self.assertEqual(chunks, [b"abc", b"def", b"gh"])


if __name__ == "__main__":
    unittest.main()
