"""Escape-sequence decoding for raw terminal input chunks.

Resolves CSI (``ESC [``) and SS3 (``ESC O``) sequences, ENTER and bare bytes
into logical key codes. Each chunk is decoded on its own; a sequence torn
across two reads is not carried over.
"""

from __future__ import annotations

from dataclasses import dataclass

from .. import keys

ESC = 0x1B
_CSI_INTRODUCER = ord("[")
_SS3_INTRODUCER = ord("O")
_CSI_NUMERIC_TERMINATOR = ord("~")
_MAX_CSI_DIGITS = 2

_CSI_FINAL_KEYS: dict[int, int] = {
    ord("A"): keys.KEY_UPARROW,
    ord("B"): keys.KEY_DOWNARROW,
    ord("C"): keys.KEY_RIGHTARROW,
    ord("D"): keys.KEY_LEFTARROW,
    ord("H"): keys.KEY_HOME,
    ord("F"): keys.KEY_END,
}

# ESC [ <n> ~ forms used by xterm, vt220 and rxvt.
_CSI_NUMERIC_KEYS: dict[int, int] = {
    1: keys.KEY_HOME,
    2: keys.KEY_INS,
    3: keys.KEY_DEL,
    4: keys.KEY_END,
    5: keys.KEY_PGUP,
    6: keys.KEY_PGDN,
    7: keys.KEY_HOME,
    8: keys.KEY_END,
    11: keys.KEY_F1,
    12: keys.KEY_F2,
    13: keys.KEY_F3,
    14: keys.KEY_F4,
    15: keys.KEY_F5,
    17: keys.KEY_F6,
    18: keys.KEY_F7,
    19: keys.KEY_F8,
    20: keys.KEY_F9,
    21: keys.KEY_F10,
    23: keys.KEY_F11,
    24: keys.KEY_F12,
}

_SS3_KEYS: dict[int, int] = {
    ord("P"): keys.KEY_F1,
    ord("Q"): keys.KEY_F2,
    ord("R"): keys.KEY_F3,
    ord("S"): keys.KEY_F4,
    # Application cursor mode.
    ord("A"): keys.KEY_UPARROW,
    ord("B"): keys.KEY_DOWNARROW,
    ord("C"): keys.KEY_RIGHTARROW,
    ord("D"): keys.KEY_LEFTARROW,
    ord("H"): keys.KEY_HOME,
    ord("F"): keys.KEY_END,
}


@dataclass(frozen=True)
class DecodedKey:
    """Result of decoding one key: the logical code and bytes consumed."""

    key: int
    consumed: int


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


def _fold_case(byte: int) -> int:
    if 0x41 <= byte <= 0x5A:
        return byte + 0x20
    return byte


def _decode_csi(data: bytes, pos: int) -> DecodedKey:
    """Decode the body of ``ESC [`` starting at ``pos`` (just past ``[``)."""
    n = len(data)
    if pos >= n:
        # Introducer with nothing after it reads as a bare ESC.
        return DecodedKey(keys.KEY_ESCAPE, 2)

    final = data[pos]
    if final in _CSI_FINAL_KEYS:
        return DecodedKey(_CSI_FINAL_KEYS[final], 3)
    if not _is_digit(final):
        return DecodedKey(keys.NO_KEY, 3)

    cursor = pos
    number = 0
    while cursor < n and _is_digit(data[cursor]) and cursor - pos < _MAX_CSI_DIGITS:
        number = number * 10 + (data[cursor] - 0x30)
        cursor += 1
    consumed = cursor - pos + 2
    if cursor >= n or data[cursor] != _CSI_NUMERIC_TERMINATOR:
        return DecodedKey(keys.NO_KEY, consumed)
    return DecodedKey(_CSI_NUMERIC_KEYS.get(number, keys.NO_KEY), consumed + 1)


def decode_key(data: bytes, pos: int = 0) -> DecodedKey:
    """Resolve the logical key starting at ``data[pos]``.

    ``consumed`` is at least one while bytes remain and never runs past
    ``len(data)``.
    A result of ``NO_KEY`` means the bytes were malformed or unsupported.
    """
    if pos >= len(data):
        return DecodedKey(keys.NO_KEY, 0)

    byte = data[pos]
    if byte == 0x0A:
        return DecodedKey(keys.KEY_ENTER, 1)
    if byte != ESC:
        return DecodedKey(_fold_case(byte), 1)

    follow = pos + 1
    if follow >= len(data):
        return DecodedKey(keys.KEY_ESCAPE, 1)
    if data[follow] == _CSI_INTRODUCER:
        return _decode_csi(data, follow + 1)
    if data[follow] == _SS3_INTRODUCER:
        if follow + 1 >= len(data):
            return DecodedKey(keys.KEY_ESCAPE, 2)
        return DecodedKey(_SS3_KEYS.get(data[follow + 1], keys.NO_KEY), 3)
    return DecodedKey(keys.KEY_ESCAPE, 1)


def decode_chunk(data: bytes) -> list[int]:
    """Decode a raw input chunk into the ordered set of keys held this tick.

    Duplicates collapse to their first occurrence. Scanning stops at the first
    step that resolves to no key.
    """
    held: list[int] = []
    pos = 0
    n = len(data)
    while pos < n:
        decoded = decode_key(data, pos)
        if decoded.key == keys.NO_KEY:
            break
        if decoded.key not in held:
            held.append(decoded.key)
        pos += decoded.consumed
    return held
