# src/cache/base_cache_store.py
"""Abstract cache store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from digestor.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for digest cache backends.

    Implementations are bounded by entry count and evict the
    oldest-inserted entry first.
    """

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""

    @abstractmethod
    async def put(self, key: str, entry: CacheEntry) -> None:
        """Insert or overwrite a cache entry."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove cache entry."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    async def list_entries(self) -> list[CacheEntry]:
        """List cached entries, oldest first."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of cached entries."""
