"""Terminal session context shared by the tick loop and the engine.

Holds every piece of long-lived state: raw mode, the previous key set, the
event queue, the frame buffer, and the tick clock origin. Entering the session
acquires the terminal; leaving it always gives the terminal back.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Callable, Sequence

from .config import Settings
from .errors import FrameOverflowError
from .input import EventQueue, InputPoller, KeyEdgeDetector, decode_chunk, read_available
from .keys import KeyEvent
from .render import FrameSerializer
from .terminal import RawModeSession, TerminalScreen

logger = logging.getLogger(__name__)


class TerminalSession:
    """Owns the terminal for the lifetime of one engine run."""

    def __init__(
        self,
        settings: Settings,
        stdin_fd: int = 0,
        stdout_fd: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.raw = RawModeSession(stdin_fd)
        self.screen = TerminalScreen(stdout_fd)
        self.serializer = FrameSerializer(
            settings.width,
            settings.height,
            mode=settings.mode,
            gradient=settings.gradient,
            glyphs=settings.glyphs,
        )
        self.edges = KeyEdgeDetector()
        self.events = EventQueue()
        self.poller: InputPoller | None = None
        if settings.threaded_input:
            self.poller = InputPoller(
                stdin_fd,
                chunk_size=settings.chunk_size,
                interval=settings.poll_interval_ms / 1000.0,
            )
        self._clock = clock
        self._started_at = clock()

    @contextlib.contextmanager
    def activated(self):
        """Acquire raw mode and the alternate screen; release both on any exit."""
        try:
            self.raw.enter()
            self.screen.enter()
            if self.poller is not None:
                self.poller.start()
            logger.info(
                "session started: %dx%d %s mode, buffer %d bytes",
                self.settings.width,
                self.settings.height,
                self.serializer.mode.value,
                self.serializer.capacity,
            )
            yield self
        finally:
            try:
                if self.poller is not None:
                    self.poller.stop()
                self.screen.leave()
            finally:
                self.edges.reset()
                self.events.clear()
                self.raw.restore()
                logger.info("session closed")

    def read_raw(self) -> bytes:
        if self.poller is not None:
            return self.poller.take()
        return read_available(self.stdin_fd, self.settings.chunk_size)

    def poll_input(self) -> int:
        """Read this tick's bytes and queue the resulting press/release events."""
        chunk = self.read_raw()
        held = decode_chunk(chunk)
        events = self.edges.diff(held)
        self.events.populate(events)
        if events:
            logger.debug("tick input %r -> %s", chunk, ", ".join(str(event) for event in events))
        return len(events)

    def next_event(self) -> KeyEvent | None:
        return self.events.next_event()

    def draw_frame(self, pixels: Sequence[int]) -> bool:
        """Serialize ``pixels`` and flush them; return whether a frame was written."""
        try:
            frame = self.serializer.serialize(pixels)
        except FrameOverflowError as exc:
            logger.warning("frame skipped: %s", exc)
            return False
        self.screen.draw(frame)
        return True

    def ticks_elapsed_ms(self) -> int:
        return int((self._clock() - self._started_at) * 1000)

    def set_window_title(self, text: str) -> None:
        self.screen.set_title(text)

    def sleep_ms(self, ms: int) -> None:
        if ms > 0:
            time.sleep(ms / 1000.0)
