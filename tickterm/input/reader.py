"""Non-blocking terminal reads, inline or from a background poller.

The terminal is configured with ``VMIN=0``/``VTIME=0``; a zero-timeout
``select`` guards the read so an idle terminal returns immediately.
"""

from __future__ import annotations

import logging
import os
import select
import threading
from collections import deque

DEFAULT_CHUNK_SIZE = 16
DEFAULT_MAX_BACKLOG = 64

logger = logging.getLogger(__name__)


def read_available(fd: int, max_bytes: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Return up to ``max_bytes`` already-buffered input bytes, or ``b""``."""
    try:
        ready, _, _ = select.select([fd], [], [], 0)
    except InterruptedError:
        return b""
    if not ready:
        return b""
    try:
        return os.read(fd, max_bytes)
    except (BlockingIOError, InterruptedError):
        return b""


class InputPoller:
    """Background reader handing raw bytes to the tick thread.

    Each terminal read is staged whole, so a sequence that arrived in one read
    reaches the decoder in one piece. Only the staging queue is shared; it is
    guarded by a single lock and keeps at most ``max_backlog`` reads.
    """

    def __init__(
        self,
        fd: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        interval: float = 0.001,
        max_backlog: int = DEFAULT_MAX_BACKLOG,
    ) -> None:
        self.fd = fd
        self.chunk_size = chunk_size
        self.interval = interval
        self.max_backlog = max_backlog
        self._lock = threading.Lock()
        self._staged: deque[bytes] = deque()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _worker(self) -> None:
        while not self._stop.is_set():
            try:
                data = read_available(self.fd, self.chunk_size)
            except OSError:
                logger.exception("input poller read failed; stopping")
                return
            if data:
                self.feed(data)
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._worker, name="tickterm-input", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        thread = self._thread
        if thread is None:
            return
        self._stop.set()
        thread.join(timeout=1.0)
        self._thread = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._staged)

    def feed(self, data: bytes) -> None:
        """Stage one read; the oldest read is dropped once the backlog is full."""
        with self._lock:
            if len(self._staged) >= self.max_backlog:
                self._staged.popleft()
                logger.debug("input backlog full; dropped oldest read")
            self._staged.append(bytes(data))

    def take(self) -> bytes:
        """Return and remove the oldest staged read, or ``b""``."""
        with self._lock:
            if not self._staged:
                return b""
            return self._staged.popleft()
