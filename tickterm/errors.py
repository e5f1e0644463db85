"""Exception types raised by the terminal presentation layer."""

from __future__ import annotations


class TickTermError(Exception):
    """Base class for tickterm failures."""


class TerminalModeError(TickTermError):
    """Querying or changing the terminal mode failed.

    Fatal: input cannot be decoded safely without raw mode, so callers abort
    instead of continuing in canonical mode.
    """

    def __init__(self, message: str, errno: int | None = None) -> None:
        if errno is not None:
            message = f"{message} (errno {errno})"
        super().__init__(message)
        self.errno = errno


class FrameOverflowError(TickTermError):
    """A frame write would run past the output buffer capacity."""

    def __init__(self, needed: int, capacity: int) -> None:
        super().__init__(f"frame needs {needed} bytes but buffer holds {capacity}")
        self.needed = needed
        self.capacity = capacity
