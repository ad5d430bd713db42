"""Logging setup for CLI runs and ``python -m vibe_architect``."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

PACKAGE_LOGGER = "vibe_architect"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; tracebacks go under ``exception``."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    *, log_file: Path, verbose: bool, json_format: bool = False
) -> logging.Logger:
    """Send package logs to ``log_file`` and return the package logger.

    The file is truncated on every call so each CLI run starts a fresh log.
    Handlers from an earlier call are closed first.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if verbose else logging.INFO
    log_path = log_file.expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JsonLogFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def configure_stream_logging(level: int = logging.INFO) -> bool:
    """Attach a JSON stderr handler to the root logger unless one is configured.

    Returns whether a handler was installed.
    """
    root = logging.getLogger()
    if root.handlers:
        return False
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    root.addHandler(handler)
    root.setLevel(level)
    return True
