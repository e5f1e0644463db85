"""Frame rendering for pixel buffers."""

from __future__ import annotations

from .frame import (
    DEFAULT_GLYPHS,
    DEFAULT_GRADIENT,
    FrameLayout,
    FrameSerializer,
    RenderMode,
    pixel_to_glyph,
)

__all__ = [
    "DEFAULT_GLYPHS",
    "DEFAULT_GRADIENT",
    "FrameLayout",
    "FrameSerializer",
    "RenderMode",
    "pixel_to_glyph",
]
