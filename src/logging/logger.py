# src/logging/logger.py
"""Logger factory with JSON and text formatters.

Log lines go to stderr (and optionally a rotating file) so stdout stays
reserved for digests printed by the CLI.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from digestor.logging.context import LogContext, get_context

ROOT_LOGGER = "digestor"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with batch/file context when set."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_context().as_dict()
        if context:
            payload["context"] = context

        # Structured extras: logger.info("...", extra={"data": {...}})
        data = getattr(record, "data", None)
        if data:
            payload["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_record_time(record):%Y-%m-%d %H:%M:%S} "
            f"[{record.levelname:8s}] {record.name}"
        )
        line += _text_context(get_context())
        line += f" - {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _text_context(ctx: LogContext) -> str:
    tag = ""
    if ctx.batch_id:
        tag += f" [batch {ctx.batch_id}]"
    if ctx.file_path:
        tag += f" <{Path(ctx.file_path).name}>"
    return tag


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the package root. Configured by setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
    stream: IO[str] | None = None,
) -> None:
    """Configure the root digestor logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Optional rotating log file, written in addition to the stream.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
        stream: Console stream, stderr by default.
    """
    formatter: logging.Formatter = (
        JsonFormatter() if log_format == "json" else TextFormatter()
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        from digestor.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(str(log_file), rotation=rotation, retention=retention)
        )

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(_LEVELS.get(level.upper(), logging.INFO))
    for old in root_logger.handlers[:]:
        root_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
