# src/cache/memory_store.py
"""In-process FIFO-bounded cache store (default CACHE_BACKEND=memory)."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from digestor.cache.base_cache_store import BaseCacheStore
from digestor.cache.models import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1000


class MemoryCacheStore(BaseCacheStore):
    """Bounded key -> CacheEntry table with first-in-first-out eviction.

    Eviction follows insertion order, not access order: overwriting an
    existing key keeps its original position, and lookups never refresh it.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    async def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    async def put(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def list_entries(self) -> list[CacheEntry]:
        with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
