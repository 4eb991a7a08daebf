# src/batch/models.py
"""Batch hashing models: BatchItem."""

from __future__ import annotations

from pydantic import BaseModel

from digestor.hashing.errors import HashingError


class BatchItem(BaseModel):
    """Outcome of hashing one file within a batch."""

    file_path: str
    success: bool
    results: dict[str, str] | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, file_path: str, results: dict[str, str]) -> BatchItem:
        return cls(file_path=file_path, success=True, results=results)

    @classmethod
    def failed(cls, file_path: str, exc: HashingError) -> BatchItem:
        return cls(
            file_path=file_path, success=False, error=str(exc), error_code=exc.code,
        )
