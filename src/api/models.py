# src/api/models.py
"""API-level response models: HashResponse, BatchHashResponse."""

from __future__ import annotations

from pydantic import BaseModel

from digestor.batch.models import BatchItem


class HashResponse(BaseModel):
    """Return value of facade.compute_file_hash()."""

    success: bool
    results: dict[str, str] | None = None
    error: str | None = None
    error_code: str | None = None


class BatchHashResponse(BaseModel):
    """Return value of facade.compute_batch_hashes().

    ``success`` is False only when the batch itself could not run; per-file
    failures are reported on the individual items.
    """

    success: bool
    results: list[BatchItem] | None = None
    error: str | None = None
