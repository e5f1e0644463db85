"""Command-line front door for tickterm.

Resolves settings from the config file and command-line flags, then runs the
demo engine in the terminal or prints a single frame.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys

from .config import Settings, load_settings, save_settings
from .demo import DemoEngine
from .errors import TerminalModeError
from .logging_setup import configure_logging
from .render import FrameSerializer, RenderMode
from .runtime import TickLoopCallbacks, TickLoopTiming, run_tick_loop
from .session import TerminalSession


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _ascii_text(value: str) -> str:
    """argparse type for non-empty printable ASCII strings."""
    if not value or not all(0x20 <= ord(ch) < 0x7F for ch in value):
        raise argparse.ArgumentTypeError("value must be non-empty printable ASCII")
    return value


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level(value: str) -> str:
    """argparse type for logging level names, case-insensitive."""
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(f"invalid log level: {value!r} (choose from {', '.join(LOG_LEVELS)})")
    return level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a pixel-producing tick loop in the terminal.")
    parser.add_argument("--mode", choices=[mode.value for mode in RenderMode], default=None, help="Render mode.")
    parser.add_argument("--width", type=_positive_int, default=None, help="Pixel buffer width.")
    parser.add_argument("--height", type=_positive_int, default=None, help="Pixel buffer height.")
    parser.add_argument("--tick-ms", type=_positive_int, default=None, help="Milliseconds per tick.")
    parser.add_argument("--gradient", type=_ascii_text, default=None, help="Dark-to-bright glyph ramp.")
    parser.add_argument("--threaded-input", action="store_true", help="Read input on a background thread.")
    parser.add_argument("--title", default="tickterm demo", help="Terminal window title.")
    parser.add_argument("--max-ticks", type=_positive_int, default=None, help="Stop after this many ticks.")
    parser.add_argument("--render-once", action="store_true", help="Print one demo frame and exit.")
    parser.add_argument("--save-defaults", action="store_true", help="Persist the resolved settings.")
    parser.add_argument("--log-level", type=_log_level, default="INFO", help="Logging level for the session log file.")
    return parser


def resolve_settings(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply command-line overrides on top of configured settings."""
    overrides: dict[str, object] = {}
    if args.mode is not None:
        overrides["mode"] = RenderMode(args.mode)
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.tick_ms is not None:
        overrides["tick_ms"] = args.tick_ms
    if args.gradient is not None:
        overrides["gradient"] = args.gradient
    if args.threaded_input:
        overrides["threaded_input"] = True
    return dataclasses.replace(base, **overrides)


def render_once(settings: Settings) -> str:
    """Render the demo's first frame as text, without touching the terminal mode."""
    engine = DemoEngine(settings.width, settings.height)
    serializer = FrameSerializer(
        settings.width,
        settings.height,
        mode=settings.mode,
        gradient=settings.gradient,
        glyphs=settings.glyphs,
    )
    return bytes(serializer.serialize(engine.pixels())).decode("ascii")


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, then print one frame or run the demo until it quits."""
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args, load_settings())
    if args.save_defaults:
        save_settings(settings)

    if args.render_once:
        sys.stdout.write(render_once(settings))
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("tickterm needs an interactive terminal (try --render-once).")

    logger = configure_logging(args.log_level)
    engine = DemoEngine(settings.width, settings.height)
    session = TerminalSession(settings, stdin_fd=sys.stdin.fileno(), stdout_fd=sys.stdout.fileno())
    try:
        with session.activated():
            session.set_window_title(args.title)
            ticks = run_tick_loop(
                session,
                TickLoopTiming(tick_ms=settings.tick_ms, max_ticks=args.max_ticks),
                TickLoopCallbacks(update=engine.update, pixels=engine.pixels),
            )
        logger.info("demo finished after %d ticks", ticks)
    except TerminalModeError as exc:
        logger.critical("terminal mode failure: %s", exc)
        raise SystemExit(f"tickterm: {exc}") from exc


if __name__ == "__main__":
    main()
