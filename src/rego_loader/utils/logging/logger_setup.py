"""Logger setup for rego-loader.

Log records carry dict payloads with an "event" key:

    logger.info({"event": "rego_files_loaded", "count": 12})

JsonLinesFormatter serializes each record as one JSON object per line and
adds "time" (ISO 8601, UTC) and "level". Plain string messages are stored
under "message".
"""

from __future__ import annotations

__all__ = [
    "JsonLinesFormatter",
    "get_logger",
    "setup_logger",
]

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from rego_loader.constants import LOGGER_NAMESPACE


class JsonLinesFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        if record.exc_info:
            payload["stacktrace"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def get_logger(area: str) -> logging.Logger:
    """Get the logger for one area of the package (e.g. "loader")."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{area}")


def setup_logger(log_level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """Configure the package root logger.

    Replaces any handlers installed by a previous call, so calling it
    twice does not duplicate output.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Append JSON lines to this file. If None, log to stderr.

    Returns:
        The configured root logger for the package.
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)
    logger.propagate = False

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(JsonLinesFormatter())
    logger.addHandler(handler)
    return logger
