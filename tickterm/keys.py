"""Logical key codes and the key event record handed to the engine.

Codes follow the classic Doom numbering: printable keys are their lowercase
ASCII value, navigation and function keys live above ``0x80``.
"""

from __future__ import annotations

from dataclasses import dataclass

NO_KEY = 0

KEY_TAB = 9
KEY_ENTER = 13
KEY_ESCAPE = 27
KEY_BACKSPACE = 0x7F

KEY_RIGHTARROW = 0xAE
KEY_LEFTARROW = 0xAC
KEY_UPARROW = 0xAD
KEY_DOWNARROW = 0xAF

KEY_F1 = 0x80 + 0x3B
KEY_F2 = 0x80 + 0x3C
KEY_F3 = 0x80 + 0x3D
KEY_F4 = 0x80 + 0x3E
KEY_F5 = 0x80 + 0x3F
KEY_F6 = 0x80 + 0x40
KEY_F7 = 0x80 + 0x41
KEY_F8 = 0x80 + 0x42
KEY_F9 = 0x80 + 0x43
KEY_F10 = 0x80 + 0x44
KEY_F11 = 0x80 + 0x57
KEY_F12 = 0x80 + 0x58

KEY_HOME = 0x80 + 0x47
KEY_END = 0x80 + 0x4F
KEY_PGUP = 0x80 + 0x49
KEY_PGDN = 0x80 + 0x51
KEY_INS = 0x80 + 0x52
KEY_DEL = 0x80 + 0x53

_KEY_NAMES: dict[int, str] = {
    KEY_TAB: "TAB",
    KEY_ENTER: "ENTER",
    KEY_ESCAPE: "ESC",
    KEY_BACKSPACE: "BACKSPACE",
    KEY_RIGHTARROW: "RIGHT",
    KEY_LEFTARROW: "LEFT",
    KEY_UPARROW: "UP",
    KEY_DOWNARROW: "DOWN",
    KEY_F1: "F1",
    KEY_F2: "F2",
    KEY_F3: "F3",
    KEY_F4: "F4",
    KEY_F5: "F5",
    KEY_F6: "F6",
    KEY_F7: "F7",
    KEY_F8: "F8",
    KEY_F9: "F9",
    KEY_F10: "F10",
    KEY_F11: "F11",
    KEY_F12: "F12",
    KEY_HOME: "HOME",
    KEY_END: "END",
    KEY_PGUP: "PGUP",
    KEY_PGDN: "PGDN",
    KEY_INS: "INS",
    KEY_DEL: "DEL",
}


def key_name(key: int) -> str:
    """Return a readable label for ``key``, used in logs and the demo title."""
    name = _KEY_NAMES.get(key)
    if name is not None:
        return name
    if 0x20 < key < 0x7F:
        return chr(key)
    if key == 0x20:
        return "SPACE"
    return f"0x{key:02x}"


@dataclass(frozen=True)
class KeyEvent:
    """One edge-triggered key transition."""

    key: int
    pressed: bool

    def __str__(self) -> str:
        return f"{'press' if self.pressed else 'release'}:{key_name(self.key)}"
