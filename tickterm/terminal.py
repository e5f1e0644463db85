"""Terminal control for the tick session.

Owns the raw-mode lifecycle (echo and line buffering off, non-blocking reads)
and the cosmetic output path: alternate screen, cursor visibility, and title.
"""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import termios

from .errors import TerminalModeError

CURSOR_HOME = b"\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
ALT_SCREEN_ON = b"\x1b[?1049h"
ALT_SCREEN_OFF = b"\x1b[?1049l"
RESET_COLORS = b"\x1b[0m"

_LFLAG = 3
_CC = 6

logger = logging.getLogger(__name__)


class RawModeSession:
    """Capture the tty configuration and switch to non-canonical, no-echo input."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._saved_tty_state: list | None = None
        self._atexit_registered = False

    @property
    def active(self) -> bool:
        return self._saved_tty_state is not None

    def enter(self) -> None:
        """Disable echo and canonical mode with ``VMIN=0``/``VTIME=0``."""
        if self._saved_tty_state is not None:
            return
        try:
            saved = termios.tcgetattr(self.fd)
        except termios.error as exc:
            raise TerminalModeError("cannot read terminal attributes", _errno_of(exc)) from exc

        attrs = list(saved)
        attrs[_LFLAG] = attrs[_LFLAG] & ~(termios.ECHO | termios.ICANON)
        cc = list(attrs[_CC])
        cc[termios.VMIN] = 0
        cc[termios.VTIME] = 0
        attrs[_CC] = cc
        try:
            termios.tcsetattr(self.fd, termios.TCSANOW, attrs)
        except termios.error as exc:
            raise TerminalModeError("cannot enter raw terminal mode", _errno_of(exc)) from exc

        self._saved_tty_state = saved
        if not self._atexit_registered:
            atexit.register(self._restore_at_exit)
            self._atexit_registered = True
        logger.debug("raw mode entered on fd %d", self.fd)

    def restore(self) -> None:
        """Reapply the captured configuration; a no-op once restored."""
        saved = self._saved_tty_state
        if saved is None:
            return
        self._saved_tty_state = None
        try:
            termios.tcsetattr(self.fd, termios.TCSANOW, saved)
        except termios.error as exc:
            raise TerminalModeError("cannot restore terminal mode", _errno_of(exc)) from exc
        logger.debug("terminal mode restored on fd %d", self.fd)

    def _restore_at_exit(self) -> None:
        """Interpreter-exit hook; a tty that is already gone is logged, not raised."""
        try:
            self.restore()
        except TerminalModeError:
            logger.exception("terminal mode not restored at exit")

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with enter/restore calls."""
        try:
            self.enter()
            yield self
        finally:
            self.restore()


def _errno_of(exc: termios.error) -> int | None:
    if exc.args and isinstance(exc.args[0], int):
        return exc.args[0]
    return None


class TerminalScreen:
    """Write frames and cosmetic control sequences to the output fd."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._entered = False

    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Write every byte, retrying after partial writes."""
        view = memoryview(data)
        while view:
            written = os.write(self.fd, view)
            view = view[written:]

    def enter(self) -> None:
        """Hide the cursor and switch to the alternate screen buffer."""
        if self._entered:
            return
        self.write(HIDE_CURSOR + ALT_SCREEN_ON)
        self._entered = True

    def leave(self) -> None:
        """Reset colors, show the cursor, and restore the main screen buffer."""
        if not self._entered:
            return
        self.write(RESET_COLORS + SHOW_CURSOR + ALT_SCREEN_OFF)
        self._entered = False

    def set_title(self, text: str) -> None:
        clean = "".join(ch for ch in text if ch.isprintable())
        self.write(b"\x1b]2;" + clean.encode("utf-8", errors="replace") + b"\x07")

    def draw(self, frame: bytes | bytearray | memoryview) -> None:
        """Redraw in place from the top-left corner in a single write."""
        self.write(CURSOR_HOME + bytes(frame))

    @contextlib.contextmanager
    def alternate_screen(self):
        try:
            self.enter()
            yield self
        finally:
            self.leave()
