"""CLI argument and settings resolution tests.

Verifies how ``tickterm.cli.main`` merges config with flags and dispatches
into one-shot rendering or the interactive tick loop.
"""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from tickterm import cli
from tickterm.config import Settings
from tickterm.errors import TerminalModeError
from tickterm.render import RenderMode


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = mock.patch("tickterm.config.CONFIG_PATH", Path(tmp.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_flags_override_config_settings(self) -> None:
        args = cli.build_parser().parse_args(["--mode", "color", "--width", "20", "--threaded-input"])

        settings = cli.resolve_settings(args, Settings(width=80, height=30, tick_ms=20))

        self.assertEqual(settings.mode, RenderMode.COLOR)
        self.assertEqual(settings.width, 20)
        self.assertEqual(settings.height, 30)
        self.assertEqual(settings.tick_ms, 20)
        self.assertTrue(settings.threaded_input)

    def test_render_once_prints_one_gradient_frame(self) -> None:
        stdout = io.StringIO()
        with mock.patch("tickterm.cli.sys.stdout", stdout):
            cli.main(["--render-once", "--width", "6", "--height", "4"])

        lines = stdout.getvalue().split("\n")
        self.assertEqual(lines[-1], "")
        self.assertEqual([len(line) for line in lines[:-1]], [6, 6])

    def test_render_once_color_mode_ends_with_reset(self) -> None:
        stdout = io.StringIO()
        with mock.patch("tickterm.cli.sys.stdout", stdout):
            cli.main(["--render-once", "--mode", "color", "--width", "2", "--height", "2"])

        self.assertTrue(stdout.getvalue().startswith("\x1b[38;2;"))
        self.assertTrue(stdout.getvalue().endswith("\x1b[0m"))

    def test_invalid_width_is_rejected(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["--width", "0"])

    def test_unknown_log_level_is_rejected_by_parser(self) -> None:
        stderr = io.StringIO()
        with mock.patch("sys.stderr", stderr), mock.patch("tickterm.cli.configure_logging") as logging_mock:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--log-level", "bogus", "--max-ticks", "1"])

        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("invalid log level", stderr.getvalue())
        logging_mock.assert_not_called()

    def test_log_level_is_case_insensitive(self) -> None:
        args = cli.build_parser().parse_args(["--log-level", "debug"])

        self.assertEqual(args.log_level, "DEBUG")
        self.assertEqual(cli.build_parser().parse_args([]).log_level, "INFO")

    def test_requires_interactive_terminal(self) -> None:
        with mock.patch("tickterm.cli.sys.stdin") as stdin_mock:
            stdin_mock.isatty.return_value = False
            with self.assertRaises(SystemExit) as ctx:
                cli.main([])

        self.assertIn("--render-once", str(ctx.exception))

    def test_runs_tick_loop_inside_activated_session(self) -> None:
        session = mock.MagicMock()
        with mock.patch("tickterm.cli.sys.stdin") as stdin_mock, mock.patch(
            "tickterm.cli.sys.stdout"
        ) as stdout_mock, mock.patch("tickterm.cli.configure_logging"), mock.patch(
            "tickterm.cli.TerminalSession", return_value=session
        ) as session_cls, mock.patch("tickterm.cli.run_tick_loop", return_value=3) as loop_mock:
            stdin_mock.isatty.return_value = True
            stdout_mock.isatty.return_value = True
            stdin_mock.fileno.return_value = 0
            stdout_mock.fileno.return_value = 1
            cli.main(["--max-ticks", "3", "--tick-ms", "10", "--title", "demo"])

        settings = session_cls.call_args.args[0]
        self.assertEqual(settings.tick_ms, 10)
        session.activated.assert_called_once()
        session.set_window_title.assert_called_once_with("demo")
        timing = loop_mock.call_args.args[1]
        self.assertEqual((timing.tick_ms, timing.max_ticks), (10, 3))

    def test_terminal_mode_failure_exits_with_message(self) -> None:
        session = mock.MagicMock()
        session.activated.side_effect = TerminalModeError("cannot enter raw terminal mode", 25)
        with mock.patch("tickterm.cli.sys.stdin") as stdin_mock, mock.patch(
            "tickterm.cli.sys.stdout"
        ) as stdout_mock, mock.patch("tickterm.cli.configure_logging"), mock.patch(
            "tickterm.cli.TerminalSession", return_value=session
        ), mock.patch("tickterm.cli.run_tick_loop") as loop_mock:
            stdin_mock.isatty.return_value = True
            stdout_mock.isatty.return_value = True
            with self.assertRaises(SystemExit) as ctx:
                cli.main([])

        loop_mock.assert_not_called()
        self.assertEqual(str(ctx.exception), "tickterm: cannot enter raw terminal mode (errno 25)")

    def test_save_defaults_persists_resolved_settings(self) -> None:
        with mock.patch("tickterm.cli.sys.stdout", io.StringIO()):
            cli.main(["--render-once", "--save-defaults", "--width", "12", "--height", "2"])

        from tickterm import config

        self.assertEqual(config.load_settings().width, 12)


if __name__ == "__main__":
    unittest.main()
