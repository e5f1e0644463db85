"""Press/release edge detection and the per-tick event queue."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence

from ..keys import KeyEvent

logger = logging.getLogger(__name__)


class KeyEdgeDetector:
    """Diff each tick's held keys against the previous tick's."""

    def __init__(self) -> None:
        self._previous: list[int] = []

    @property
    def previous(self) -> tuple[int, ...]:
        return tuple(self._previous)

    def diff(self, current: Sequence[int]) -> list[KeyEvent]:
        """Return press events then release events, and remember ``current``.

        Presses follow ``current`` order and releases follow the previous
        tick's order. A key held on both ticks produces nothing.
        """
        held: list[int] = []
        for key in current:
            if key not in held:
                held.append(key)

        previous = set(self._previous)
        now = set(held)
        events = [KeyEvent(key, True) for key in held if key not in previous]
        events.extend(KeyEvent(key, False) for key in self._previous if key not in now)
        self._previous = held
        return events

    def reset(self) -> None:
        self._previous = []


class EventQueue:
    """FIFO of key events populated once per tick and drained by the engine."""

    def __init__(self) -> None:
        self._events: deque[KeyEvent] = deque()

    def __len__(self) -> int:
        return len(self._events)

    def populate(self, events: Iterable[KeyEvent]) -> None:
        """Replace queue contents with this tick's events.

        Events the engine did not drain on the previous tick are dropped.
        """
        if self._events:
            logger.debug("dropping %d undrained key events", len(self._events))
            self._events.clear()
        self._events.extend(events)

    def next_event(self) -> KeyEvent | None:
        if not self._events:
            return None
        return self._events.popleft()

    def clear(self) -> None:
        self._events.clear()
