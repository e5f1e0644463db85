"""Raw keyboard input: reading, escape decoding, and edge detection."""

from __future__ import annotations

from .decoder import DecodedKey, decode_chunk, decode_key
from .edges import EventQueue, KeyEdgeDetector
from .reader import DEFAULT_CHUNK_SIZE, InputPoller, read_available

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DecodedKey",
    "EventQueue",
    "InputPoller",
    "KeyEdgeDetector",
    "decode_chunk",
    "decode_key",
    "read_available",
]
