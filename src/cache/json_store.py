# src/cache/json_store.py
"""JSON file-based cache store (CACHE_BACKEND=json).

Stores cache entries as individual JSON files under CACHE_ROOT so results
survive process restarts. Applies the same FIFO bound as the memory store,
ordered by each entry's ``created_at``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from pathlib import Path

from pydantic import ValidationError

from digestor.cache.base_cache_store import BaseCacheStore
from digestor.cache.memory_store import DEFAULT_MAX_ENTRIES
from digestor.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(
        self, cache_root: str | Path, max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)
        self._max_entries = max_entries
        self._lock = threading.Lock()
        # key -> None, in insertion order
        self._order: OrderedDict[str, None] = OrderedDict()
        self._load_index()

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        with self._lock:
            if key not in self._order:
                return None
            return self._read(self._entry_path(key))

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry, evicting the oldest ones past the bound."""
        with self._lock:
            path = self._entry_path(key)
            path.write_text(entry.model_dump_json(indent=2), encoding="utf-8")
            if key not in self._order:
                self._order[key] = None
            while len(self._order) > self._max_entries:
                evicted, _ = self._order.popitem(last=False)
                self._entry_path(evicted).unlink(missing_ok=True)
                logger.debug("Evicted cache entry %s", evicted)

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        with self._lock:
            self._order.pop(key, None)
            self._entry_path(key).unlink(missing_ok=True)

    async def clear(self) -> None:
        with self._lock:
            for key in list(self._order):
                self._entry_path(key).unlink(missing_ok=True)
            self._order.clear()

    async def list_entries(self) -> list[CacheEntry]:
        """List all cached entries, oldest first."""
        with self._lock:
            entries = [self._read(self._entry_path(k)) for k in self._order]
        return [e for e in entries if e is not None]

    def __len__(self) -> int:
        return len(self._order)

    def _load_index(self) -> None:
        """Rebuild insertion order from entries already on disk."""
        found: list[CacheEntry] = []
        for path in self._root.glob("*.json"):
            entry = self._read(path)
            if entry is not None:
                found.append(entry)
        found.sort(key=lambda e: e.created_at)
        for entry in found:
            self._order[entry.key] = None
        while len(self._order) > self._max_entries:
            evicted, _ = self._order.popitem(last=False)
            self._entry_path(evicted).unlink(missing_ok=True)
        if found:
            logger.info("Loaded %d cache entries from %s", len(self._order), self._root)

    def _read(self, path: Path) -> CacheEntry | None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return CacheEntry(**data)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning("Failed to read cache entry %s: %s", path.name, e)
            return None

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"
