"""Structured logging configuration.

Log lines are either JSON objects or short human-readable lines. Each JSON
line carries a category derived from the emitting module, plus any domain
fields passed through ``extra=`` (component, prop, handle, reason, ...).
File output is optional and configured through ``Settings.log_file`` and
``Settings.log_error_file``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ease_studio.config import get_log_level, settings

if TYPE_CHECKING:
    from typing import TextIO

# Module (below the package) -> category
CATEGORIES = {
    "editor": "editor",
    "path_model": "editor",
    "session": "editor",
    "normalizer": "normalizer",
    "evaluator": "animation",
    "driver": "animation",
    "store": "storage",
    "cli": "cli",
}

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

_MAX_LOG_BYTES = 5 * 1024 * 1024


def category_for(logger_name: str) -> str:
    """Category of a logger, "system" for anything outside the editor stack."""
    package, _, rest = logger_name.partition(".")
    if package != "ease_studio":
        return "system"
    return CATEGORIES.get(rest.split(".")[0], "system")


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredFormatter(logging.Formatter):
    """JSON lines formatter."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "category": category_for(record.name),
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry)


class ErrorFilter(logging.Filter):
    """Only let ERROR and CRITICAL through (for the error log file)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _file_handler(path: str, backup_count: int) -> RotatingFileHandler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path, maxBytes=_MAX_LOG_BYTES, backupCount=backup_count, encoding="utf-8"
    )


def configure_logging(
    *,
    json_format: bool = True,
    log_level: int | str = logging.INFO,
    log_file: str | None = None,
    error_log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Replace the root handlers with stream and optional file handlers.

    Args:
        json_format: JSON lines instead of human-readable lines
        log_level: Minimum log level
        log_file: Rotating file receiving every record
        error_log_file: Rotating file receiving ERROR and above only
        stream: Stream to write to (default: sys.stderr)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter: logging.Formatter
    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)5s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(_file_handler(log_file, backup_count=2))
    if error_log_file:
        error_handler = _file_handler(error_log_file, backup_count=5)
        error_handler.addFilter(ErrorFilter())
        handlers.append(error_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def setup_logging(stream: TextIO | None = None) -> None:
    """Configure logging from settings (level, debug flag, JSON, log files)."""
    configure_logging(
        json_format=settings.log_json,
        log_level=get_log_level(),
        log_file=settings.log_file,
        error_log_file=settings.log_error_file,
        stream=stream,
    )
