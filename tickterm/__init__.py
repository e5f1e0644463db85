"""Public package surface for tickterm.

Exports the terminal session and key event types used by engines, plus
``main`` for programmatic CLI invocation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .keys import KeyEvent
    from .session import TerminalSession


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "TerminalSession":
        from .session import TerminalSession

        return TerminalSession
    if name == "KeyEvent":
        from .keys import KeyEvent

        return KeyEvent
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["KeyEvent", "TerminalSession", "main"]
