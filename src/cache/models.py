# src/cache/models.py
"""Cache domain models: CacheEntry."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Digest results for one (file, algorithm set) pair.

    ``size_bytes`` and ``mtime_ns`` record the file's stat signature at
    hashing time so a later lookup can tell whether the file changed.
    """

    key: str
    file_path: str
    results: dict[str, str]
    size_bytes: int | None = None
    mtime_ns: int | None = None
    created_at: datetime
