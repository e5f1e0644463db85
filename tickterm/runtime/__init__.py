"""Tick loop entry points."""

from __future__ import annotations

from .loop import TickLoopCallbacks, TickLoopTiming, run_tick_loop

__all__ = ["TickLoopCallbacks", "TickLoopTiming", "run_tick_loop"]
