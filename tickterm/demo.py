"""Demo engine: a scrolling color field with a player square.

Stands in for a real game so the CLI can exercise input decoding, edge
events, and both render modes end to end.
"""

from __future__ import annotations

import logging

from . import keys
from .keys import KeyEvent, key_name
from .session import TerminalSession

logger = logging.getLogger(__name__)

PLAYER_SIZE = 4
PLAYER_COLOR = 0xFFFFFFFF

_DIRECTIONS: dict[int, tuple[int, int]] = {
    keys.KEY_UPARROW: (0, -1),
    keys.KEY_DOWNARROW: (0, 1),
    keys.KEY_LEFTARROW: (-1, 0),
    keys.KEY_RIGHTARROW: (1, 0),
    ord("w"): (0, -1),
    ord("s"): (0, 1),
    ord("a"): (-1, 0),
    ord("d"): (1, 0),
}
_QUIT_KEYS = {ord("q"), keys.KEY_ESCAPE}


def _wave(value: int) -> int:
    """Triangle wave over 0..511 folded into 0..255."""
    value %= 512
    return value if value < 256 else 511 - value


def _argb(r: int, g: int, b: int) -> int:
    return 0xFF000000 | (r << 16) | (g << 8) | b


class DemoEngine:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.frame = 0
        self.player_x = max(0, (width - PLAYER_SIZE) // 2)
        self.player_y = max(0, (height - PLAYER_SIZE) // 2)
        self.held: set[int] = set()
        self.running = True
        self.last_event = ""
        self._pixels = [0] * (width * height)

    def handle_event(self, event: KeyEvent) -> None:
        self.last_event = str(event)
        if event.pressed:
            self.held.add(event.key)
            if event.key in _QUIT_KEYS:
                logger.info("quit requested with %s", key_name(event.key))
                self.running = False
        else:
            self.held.discard(event.key)

    def step(self) -> None:
        dx = sum(_DIRECTIONS[key][0] for key in self.held if key in _DIRECTIONS)
        dy = sum(_DIRECTIONS[key][1] for key in self.held if key in _DIRECTIONS)
        self.player_x = min(max(0, self.player_x + dx), max(0, self.width - PLAYER_SIZE))
        self.player_y = min(max(0, self.player_y + dy), max(0, self.height - PLAYER_SIZE))
        self.frame += 1

    def update(self, session: TerminalSession) -> bool:
        """Drain this tick's events, advance one frame, and keep the title current."""
        had_events = False
        while True:
            event = session.next_event()
            if event is None:
                break
            had_events = True
            self.handle_event(event)
        if not self.running:
            return False
        self.step()
        if had_events:
            session.set_window_title(f"tickterm demo - {self.last_event}")
        return True

    def pixels(self) -> list[int]:
        """Render the current frame into the reused pixel list."""
        out = self._pixels
        shift = self.frame * 6
        for y in range(self.height):
            row = y * self.width
            for x in range(self.width):
                out[row + x] = _argb(_wave(x * 8 + shift), _wave(y * 10 + shift // 2), _wave((x + y) * 5))
        for y in range(self.player_y, min(self.height, self.player_y + PLAYER_SIZE)):
            row = y * self.width
            for x in range(self.player_x, min(self.width, self.player_x + PLAYER_SIZE)):
                out[row + x] = PLAYER_COLOR
        return out
