# src/batch/scheduler.py
"""Batch scheduler: bounded-concurrency hashing of many files.

Paths are split into consecutive groups no larger than the parallelism
bound. Files within a group are hashed concurrently; the next group starts
only once the whole previous group has finished. Every path yields exactly
one BatchItem, in input order.
"""

from __future__ import annotations

import asyncio
import logging
import math
import os
import time
import uuid
from collections.abc import Iterable, Sequence

from digestor.batch.models import BatchItem
from digestor.hashing.errors import HashingError
from digestor.hashing.service import HashService
from digestor.logging.context import set_batch_context, set_file_context

logger = logging.getLogger(__name__)

DEFAULT_PARALLELISM_CEILING = 8


def default_parallelism(ceiling: int = DEFAULT_PARALLELISM_CEILING) -> int:
    """Return ``min(2 * logical cores, ceiling)``, at least 1."""
    cpus = os.cpu_count() or 1
    return max(1, min(2 * cpus, ceiling))


class BatchScheduler:
    """Drive a HashService over many files with a group-bounded fan-out."""

    def __init__(
        self,
        service: HashService | None = None,
        max_parallelism: int | None = None,
    ) -> None:
        self._service = service or HashService()
        settings = self._service.settings
        if max_parallelism is None:
            max_parallelism = settings.batch_max_parallelism or default_parallelism(
                settings.batch_parallelism_ceiling
            )
        if max_parallelism < 1:
            raise ValueError("max_parallelism must be >= 1")
        self._max_parallelism = max_parallelism

    @property
    def max_parallelism(self) -> int:
        return self._max_parallelism

    @property
    def service(self) -> HashService:
        return self._service

    async def compute_batch(
        self,
        paths: Sequence[str | os.PathLike[str]],
        algorithms: Iterable[str],
    ) -> list[BatchItem]:
        """Hash every path and return one BatchItem per path, in input order.

        Per-file failures (HashingError) are captured in that file's item.
        Any other exception is a scheduling failure and propagates.
        """
        algorithms = list(algorithms)
        file_paths = [os.fspath(p) for p in paths]
        batch_id = uuid.uuid4().hex[:8]
        set_batch_context(batch_id)

        t0 = time.perf_counter()
        items: list[BatchItem] = []
        size = self._max_parallelism
        for start in range(0, len(file_paths), size):
            group = file_paths[start : start + size]
            items.extend(await self._run_group(group, algorithms))

        failed = sum(1 for item in items if not item.success)
        logger.info(
            "Batch %s complete: %d files, %d failed, %d groups of <= %d in %.2fs",
            batch_id, len(items), failed,
            math.ceil(len(file_paths) / size), size, time.perf_counter() - t0,
        )
        return items

    async def _run_group(
        self, group: list[str], algorithms: list[str],
    ) -> list[BatchItem]:
        """Hash one group concurrently.

        Repeated paths inside the group (compared as absolute paths, like
        cache keys) run after the group's first occurrences so they are
        served from the warm cache.
        """
        first_index: dict[str, int] = {}
        repeats: list[int] = []
        for i, path in enumerate(group):
            ident = os.path.abspath(path)
            if ident in first_index:
                repeats.append(i)
            else:
                first_index[ident] = i

        firsts = list(first_index.values())
        slots: list[BatchItem | None] = [None] * len(group)
        for indices in (firsts, repeats):
            if not indices:
                continue
            outcomes = await _gather_settled(
                [self._hash_one(group[i], algorithms) for i in indices]
            )
            for i, item in zip(indices, outcomes):
                slots[i] = item
        return [item for item in slots if item is not None]

    async def _hash_one(self, path: str, algorithms: list[str]) -> BatchItem:
        set_file_context(path)
        try:
            results = await self._service.hash_file(path, algorithms)
        except HashingError as exc:
            logger.warning("Hashing failed for %s: %s", path, exc)
            return BatchItem.failed(path, exc)
        return BatchItem.ok(path, results)


async def _gather_settled(coros: list) -> list[BatchItem]:
    """Run ``coros`` concurrently and wait for all of them to finish.

    If any of them raised, the first exception is re-raised only after its
    siblings have settled, so no hashing keeps running once a group aborts.
    """
    outcomes = await asyncio.gather(*coros, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return outcomes
