"""File logging for terminal sessions.

The terminal is owned by frame output, so records go to a JSON-lines file
under the user log directory rather than to the console.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from platformdirs import user_log_dir

_LOGGER_NAME = "tickterm"
LOG_FILENAME = "tickterm.log"


def log_dir() -> Path:
    path = Path(user_log_dir(_LOGGER_NAME, appauthor=False))
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level: int | str = logging.INFO, path: Path | None = None) -> logging.Logger:
    """Attach the JSON file handler to the package logger once."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    target = path if path is not None else log_dir() / LOG_FILENAME
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    logger.info("logging configured at %s", target)
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)
