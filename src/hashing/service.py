# src/hashing/service.py
"""Hash service: cache lookup, streaming computation and cache store.

The service owns its cache store; nothing here is module-level state, so
separate services (or tests) never share results.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from datetime import datetime, timezone

from digestor.cache.base_cache_store import BaseCacheStore
from digestor.cache.cache_factory import create_cache_store
from digestor.cache.keys import file_signature, is_fresh, make_cache_key
from digestor.cache.models import CacheEntry
from digestor.config.settings import Settings
from digestor.hashing.algorithms import canonical_name, normalize_algorithms
from digestor.hashing.errors import FileUnreadableError
from digestor.hashing.hasher import compute_hashes

logger = logging.getLogger(__name__)


class HashService:
    """Single-file hashing with memoization.

    Args:
        settings: Application settings. Loaded from .env if None.
        cache: Cache backend. Built from settings when None and
            CACHE_ENABLED is true; no caching otherwise.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cache: BaseCacheStore | None = None,
    ) -> None:
        self._settings = settings or Settings()
        if cache is None and self._settings.cache_enabled:
            cache = create_cache_store(self._settings)
        self._cache = cache
        self.hits = 0
        self.misses = 0

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> BaseCacheStore | None:
        return self._cache

    async def hash_file(
        self, path: str | os.PathLike[str], algorithms: Iterable[str],
    ) -> dict[str, str]:
        """Return digests of ``path`` for ``algorithms``, using the cache when possible.

        Results are keyed by the algorithm names as the caller spelled them;
        when two spellings name the same algorithm the first one wins. The
        cache itself always stores canonical names.

        Raises:
            HashingError: Any failure from validation or computation. Nothing
                is cached on failure.
        """
        requested = [algorithms] if isinstance(algorithms, str) else list(algorithms)
        names = normalize_algorithms(requested)
        spelling = _caller_spelling(requested)
        try:
            key = make_cache_key(path, names)
        except TypeError as exc:
            raise FileUnreadableError(f"Invalid file path: {path!r}") from exc

        if self._cache is not None:
            entry = await self._cache.get(key)
            if entry is not None:
                if not self._settings.cache_check_freshness or is_fresh(entry, path):
                    self.hits += 1
                    logger.debug("Cache hit for %s", key)
                    return _rekey(entry.results, spelling)
                logger.info("Cache entry for %s is stale, rehashing", path)

        self.misses += 1
        # Stat before reading so a write during hashing makes the entry stale.
        signature = file_signature(path)
        results = await compute_hashes(path, names, self._settings.hash_chunk_size)

        if self._cache is not None:
            size_bytes, mtime_ns = signature if signature else (None, None)
            await self._cache.put(
                key,
                CacheEntry(
                    key=key,
                    file_path=os.path.abspath(os.fspath(path)),
                    results=results,
                    size_bytes=size_bytes,
                    mtime_ns=mtime_ns,
                    created_at=datetime.now(timezone.utc),
                ),
            )
        return _rekey(results, spelling)


def _caller_spelling(requested: list[str]) -> dict[str, str]:
    """Map canonical name -> first spelling the caller used for it."""
    spelling: dict[str, str] = {}
    for name in requested:
        spelling.setdefault(canonical_name(name), name)
    return spelling


def _rekey(results: dict[str, str], spelling: dict[str, str]) -> dict[str, str]:
    return {spelling.get(name, name): digest for name, digest in results.items()}
