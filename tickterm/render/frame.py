"""Pixel-buffer to terminal-frame serialization.

Frames are packed into one preallocated ``bytearray`` whose capacity is the
worst-case byte count for the configured mode and dimensions. The buffer is
reused every tick and a NUL sentinel always follows the write cursor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ..errors import FrameOverflowError

DEFAULT_GRADIENT = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"
DEFAULT_GLYPHS = "##"

COLOR_PREFIX = b"\x1b[38;2;"
RESET_SEQUENCE = b"\x1b[0m"
MAX_COLOR_ESCAPE_LEN = len(COLOR_PREFIX) + len(b"255;255;255m")


class RenderMode(str, Enum):
    GRADIENT = "gradient"
    COLOR = "color"


@dataclass(frozen=True)
class FrameLayout:
    """Worst-case byte cost of one frame in a given mode."""

    max_escape_len: int
    glyph_bytes: int
    reset_len: int

    def capacity(self, width: int, height: int) -> int:
        """Bytes needed for every pixel, one newline per row, reset and sentinel."""
        per_pixel = self.max_escape_len + self.glyph_bytes
        return per_pixel * width * height + height + self.reset_len + 1


GRADIENT_LAYOUT = FrameLayout(max_escape_len=0, glyph_bytes=1, reset_len=0)
COLOR_LAYOUT = FrameLayout(
    max_escape_len=MAX_COLOR_ESCAPE_LEN,
    glyph_bytes=len(DEFAULT_GLYPHS),
    reset_len=len(RESET_SEQUENCE),
)


def layout_for(mode: RenderMode) -> FrameLayout:
    return COLOR_LAYOUT if mode is RenderMode.COLOR else GRADIENT_LAYOUT


def pixel_channels(pixel: int) -> tuple[int, int, int]:
    """Split an ``0xAARRGGBB`` pixel into its red, green and blue channels."""
    return (pixel >> 16) & 0xFF, (pixel >> 8) & 0xFF, pixel & 0xFF


def pixel_brightness(pixel: int) -> int:
    r, g, b = pixel_channels(pixel)
    return (r + g + b) // 3


def gradient_index(brightness: int, gradient_length: int) -> int:
    return brightness * (gradient_length - 1) // 255


def pixel_to_glyph(pixel: int, gradient: str = DEFAULT_GRADIENT) -> str:
    """Map a pixel to a gradient character by average brightness; alpha is ignored."""
    return gradient[gradient_index(pixel_brightness(pixel), len(gradient))]


def _is_printable_ascii(text: str) -> bool:
    return all(0x20 <= ord(ch) < 0x7F for ch in text)


class FrameSerializer:
    """Serialize pixel buffers of a fixed size into a reused output buffer."""

    def __init__(
        self,
        width: int,
        height: int,
        mode: RenderMode = RenderMode.GRADIENT,
        gradient: str = DEFAULT_GRADIENT,
        glyphs: str = DEFAULT_GLYPHS,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"frame dimensions must be positive, got {width}x{height}")
        if not gradient or not _is_printable_ascii(gradient):
            raise ValueError("gradient must be a non-empty printable ASCII string")
        if len(glyphs) != COLOR_LAYOUT.glyph_bytes or not _is_printable_ascii(glyphs):
            raise ValueError("glyphs must be exactly two printable ASCII characters")

        self.width = width
        self.height = height
        self.mode = RenderMode(mode)
        self.gradient = gradient
        self.glyphs = glyphs
        self.layout = layout_for(self.mode)
        self.capacity = self.layout.capacity(width, height)
        self.buffer = bytearray(self.capacity)
        self.length = 0

        gradient_bytes = gradient.encode("ascii")
        self._glyph_table = bytes(
            gradient_bytes[gradient_index(level, len(gradient_bytes))] for level in range(256)
        )
        self._glyph_pair = glyphs.encode("ascii")
        self._decimal = [str(value).encode("ascii") for value in range(256)]

    def sampled_rows(self) -> range:
        """Rows written per frame; gradient mode halves vertical resolution."""
        if self.mode is RenderMode.GRADIENT:
            return range(0, self.height, 2)
        return range(self.height)

    def _gradient_row(self, pixels: Sequence[int], y: int) -> bytes:
        start = y * self.width
        table = self._glyph_table
        row = bytearray(table[pixel_brightness(pixel)] for pixel in pixels[start : start + self.width])
        row.append(0x0A)
        return bytes(row)

    def _color_row(self, pixels: Sequence[int], y: int) -> bytes:
        start = y * self.width
        decimal = self._decimal
        glyph_pair = self._glyph_pair
        parts: list[bytes] = []
        for pixel in pixels[start : start + self.width]:
            r, g, b = pixel_channels(pixel)
            parts.append(COLOR_PREFIX + decimal[r] + b";" + decimal[g] + b";" + decimal[b] + b"m" + glyph_pair)
        parts.append(b"\n")
        return b"".join(parts)

    def _row_bytes(self, pixels: Sequence[int], y: int) -> bytes:
        if self.mode is RenderMode.COLOR:
            return self._color_row(pixels, y)
        return self._gradient_row(pixels, y)

    def serialize(self, pixels: Sequence[int]) -> memoryview:
        """Write one frame and return a view of the bytes written.

        Raises ``FrameOverflowError`` before copying any row that would not
        leave room for the reset sequence and sentinel; the caller must then
        skip flushing this frame.
        """
        expected = self.width * self.height
        if len(pixels) < expected:
            raise ValueError(f"pixel buffer holds {len(pixels)} pixels, expected {expected}")

        buffer = self.buffer
        limit = self.capacity - self.layout.reset_len - 1
        pos = 0
        for y in self.sampled_rows():
            row = self._row_bytes(pixels, y)
            end = pos + len(row)
            if end > limit:
                self.length = 0
                buffer[0] = 0
                raise FrameOverflowError(end + self.layout.reset_len + 1, self.capacity)
            buffer[pos:end] = row
            pos = end

        if self.mode is RenderMode.COLOR:
            end = pos + len(RESET_SEQUENCE)
            buffer[pos:end] = RESET_SEQUENCE
            pos = end
        buffer[pos] = 0
        self.length = pos
        return memoryview(buffer)[:pos]

    def frame(self) -> memoryview:
        """View of the most recently serialized frame, without the sentinel."""
        return memoryview(self.buffer)[: self.length]
