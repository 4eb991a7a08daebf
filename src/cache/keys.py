# src/cache/keys.py
"""Cache key derivation and file stat signatures."""

from __future__ import annotations

import os
from collections.abc import Iterable

from digestor.cache.models import CacheEntry


def make_cache_key(path: str | os.PathLike[str], algorithms: Iterable[str]) -> str:
    """Build ``"<absolute path>|<ALGO,ALGO,...>"``.

    Algorithms are upper-cased, de-duplicated and sorted, so request order
    and casing never produce distinct keys.
    """
    abs_path = os.path.abspath(os.fspath(path))
    algos = sorted({a.strip().upper() for a in algorithms})
    return f"{abs_path}|{','.join(algos)}"


def file_signature(path: str | os.PathLike[str]) -> tuple[int, int] | None:
    """Return ``(size_bytes, mtime_ns)`` for ``path``, or None if stat fails.

    Paths the OS rejects outright (embedded NUL, wrong type) also give None.
    """
    try:
        st = os.stat(path)
    except (OSError, ValueError, TypeError):
        return None
    return st.st_size, st.st_mtime_ns


def is_fresh(entry: CacheEntry, path: str | os.PathLike[str]) -> bool:
    """True when ``path`` still has the size and mtime recorded in ``entry``.

    Entries stored without a signature are never considered fresh.
    """
    if entry.size_bytes is None or entry.mtime_ns is None:
        return False
    return file_signature(path) == (entry.size_bytes, entry.mtime_ns)
