# src/api/facade.py
"""Public API facade: the two operations a presentation layer calls.

Usage:
    from digestor.api.facade import compute_file_hash, compute_batch_hashes
    response = await compute_file_hash("/data/file.iso", ["SHA256", "MD5"])

Exceptions never escape these functions; failures are reported in the
returned response models.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

from digestor.api.models import BatchHashResponse, HashResponse
from digestor.batch.scheduler import BatchScheduler
from digestor.hashing.errors import HashingError
from digestor.hashing.service import HashService

logger = logging.getLogger(__name__)


async def compute_file_hash(
    path: str | os.PathLike[str],
    algorithms: Sequence[str],
    service: HashService | None = None,
) -> HashResponse:
    """Hash one file.

    Args:
        path: Absolute path of the file to hash.
        algorithms: Non-empty list of algorithm names.
        service: Hash service owning the cache. A fresh one if None.

    Returns:
        HashResponse with ``results`` on success or ``error`` on failure.
    """
    service = service or HashService()
    try:
        results = await service.hash_file(path, algorithms)
    except HashingError as exc:
        logger.info("compute_file_hash failed for %s: %s", path, exc)
        return HashResponse(success=False, error=str(exc), error_code=exc.code)
    except Exception as exc:
        logger.exception("compute_file_hash aborted for %r", path)
        return HashResponse(success=False, error=str(exc))
    return HashResponse(success=True, results=results)


async def compute_batch_hashes(
    paths: Sequence[str | os.PathLike[str]],
    algorithms: Sequence[str],
    service: HashService | None = None,
    max_parallelism: int | None = None,
) -> BatchHashResponse:
    """Hash many files with bounded concurrency.

    Args:
        paths: Absolute file paths. Output order follows this order.
        algorithms: Non-empty list of algorithm names.
        service: Hash service owning the cache. A fresh one if None.
        max_parallelism: Override for the group size.

    Returns:
        BatchHashResponse with one BatchItem per path.
    """
    try:
        scheduler = BatchScheduler(
            service=service or HashService(), max_parallelism=max_parallelism,
        )
        items = await scheduler.compute_batch(paths, algorithms)
    except Exception as exc:
        logger.exception("Batch hashing aborted")
        return BatchHashResponse(success=False, error=str(exc))
    return BatchHashResponse(success=True, results=items)
