"""Fixed-rate tick loop driving a pixel-producing engine.

Each tick reads input, lets the engine update, draws one frame, then sleeps
out the rest of the tick.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..session import TerminalSession


@dataclass(frozen=True)
class TickLoopTiming:
    """Pacing for ``run_tick_loop``; ``max_ticks`` of ``None`` runs until stopped."""

    tick_ms: int
    max_ticks: int | None = None


@dataclass(frozen=True)
class TickLoopCallbacks:
    """Engine hooks used by ``run_tick_loop``.

    ``update`` drains events from the session and advances the engine; it
    returns ``False`` to stop the loop. ``pixels`` returns the frame to draw.
    """

    update: Callable[[TerminalSession], bool]
    pixels: Callable[[], Sequence[int]]


def run_tick_loop(session: TerminalSession, timing: TickLoopTiming, callbacks: TickLoopCallbacks) -> int:
    """Run ticks until ``update`` returns ``False`` or ``max_ticks`` is reached.

    Returns the number of ticks whose update completed.
    """
    ticks = 0
    next_deadline = session.ticks_elapsed_ms()
    while timing.max_ticks is None or ticks < timing.max_ticks:
        session.poll_input()
        if not callbacks.update(session):
            break
        session.draw_frame(callbacks.pixels())
        ticks += 1

        next_deadline += timing.tick_ms
        now = session.ticks_elapsed_ms()
        if next_deadline > now:
            session.sleep_ms(next_deadline - now)
        else:
            # Running behind; do not try to catch up with a burst of ticks.
            next_deadline = now
    return ticks
