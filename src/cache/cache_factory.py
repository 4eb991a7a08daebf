# src/cache/cache_factory.py
"""Factory for cache store instantiation."""

from __future__ import annotations

from digestor.cache.base_cache_store import BaseCacheStore
from digestor.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to a 1000-entry memory store.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend
    max_entries = 1000 if settings is None else settings.cache_max_entries

    if backend == "memory":
        from digestor.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore(max_entries=max_entries)

    if backend == "json":
        from digestor.cache.json_store import JsonCacheStore
        return JsonCacheStore(
            cache_root=settings.cache_root, max_entries=max_entries,  # type: ignore[union-attr]
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")
