"""Persistent JSON config helpers.

Stores the default frame size, render mode, gradient, and tick pacing.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .input.reader import DEFAULT_CHUNK_SIZE
from .render.frame import DEFAULT_GLYPHS, DEFAULT_GRADIENT, RenderMode

APP_NAME = "tickterm"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

MAX_DIMENSION = 4096
MAX_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class Settings:
    """Session settings resolved from config and command-line overrides."""

    width: int = 80
    height: int = 48
    mode: RenderMode = RenderMode.GRADIENT
    gradient: str = DEFAULT_GRADIENT
    glyphs: str = DEFAULT_GLYPHS
    tick_ms: int = 16
    chunk_size: int = DEFAULT_CHUNK_SIZE
    threaded_input: bool = False
    poll_interval_ms: int = 1


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem and serialization errors are ignored so a read-only config
    directory never stops a session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError):
        pass


def _coerce_int(value: object, default: int, low: int, high: int) -> int:
    """Accept integers within ``[low, high]``; booleans and others fall back."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < low or value > high:
        return default
    return value


def _coerce_ascii(value: object, default: str, length: int | None = None) -> str:
    if not isinstance(value, str) or not value:
        return default
    if length is not None and len(value) != length:
        return default
    if not all(0x20 <= ord(ch) < 0x7F for ch in value):
        return default
    return value


def _coerce_mode(value: object) -> RenderMode:
    if isinstance(value, str):
        try:
            return RenderMode(value.strip().lower())
        except ValueError:
            pass
    return RenderMode.GRADIENT


def load_settings() -> Settings:
    """Build ``Settings`` from the config file, validating each field on its own."""
    data = load_config()
    defaults = Settings()
    threaded = data.get("threaded_input")
    return Settings(
        width=_coerce_int(data.get("width"), defaults.width, 1, MAX_DIMENSION),
        height=_coerce_int(data.get("height"), defaults.height, 1, MAX_DIMENSION),
        mode=_coerce_mode(data.get("mode")),
        gradient=_coerce_ascii(data.get("gradient"), defaults.gradient),
        glyphs=_coerce_ascii(data.get("glyphs"), defaults.glyphs, length=len(defaults.glyphs)),
        tick_ms=_coerce_int(data.get("tick_ms"), defaults.tick_ms, 1, 1000),
        chunk_size=_coerce_int(data.get("chunk_size"), defaults.chunk_size, 1, MAX_CHUNK_SIZE),
        threaded_input=threaded if isinstance(threaded, bool) else defaults.threaded_input,
        poll_interval_ms=_coerce_int(data.get("poll_interval_ms"), defaults.poll_interval_ms, 1, 1000),
    )


def save_settings(settings: Settings) -> None:
    """Persist ``settings`` while keeping unrelated keys already in the file."""
    config = load_config()
    config.update(
        {
            "width": settings.width,
            "height": settings.height,
            "mode": settings.mode.value,
            "gradient": settings.gradient,
            "glyphs": settings.glyphs,
            "tick_ms": settings.tick_ms,
            "chunk_size": settings.chunk_size,
            "threaded_input": settings.threaded_input,
            "poll_interval_ms": settings.poll_interval_ms,
        }
    )
    save_config(config)
