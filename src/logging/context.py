# src/logging/context.py
"""Contextual logging support: attach batch_id and file_path to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set per batch run and per hashed file. asyncio tasks copy the context,
# so concurrent files in one group each see their own file_path.
_batch_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "batch_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    batch_id: str | None = None
    file_path: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(batch_id=_batch_id.get(), file_path=_file_path.get())


def set_batch_context(batch_id: str) -> None:
    """Set batch-level context (called once per batch run)."""
    _batch_id.set(batch_id)


def set_file_context(file_path: str) -> None:
    """Set file-level context (called per hashed file)."""
    _file_path.set(file_path)


def clear_context() -> None:
    """Reset all context variables."""
    _batch_id.set(None)
    _file_path.set(None)
