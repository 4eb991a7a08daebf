# tests/conftest.py
"""Shared test fixtures for unit and integration tests.

Provides isolated settings, sample files with known digests, and a
hash service backed by a fresh memory cache.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from digestor.cache.memory_store import MemoryCacheStore
from digestor.config.settings import Settings
from digestor.hashing.service import HashService

# Digests of the empty byte string
EMPTY_DIGESTS = {
    "MD5": "d41d8cd98f00b204e9800998ecf8427e",
    "SHA1": "da39a3ee5e6b4b0d3255bfef95601890afd80709",
    "SHA256": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
}


def _expected_digests(data: bytes, algorithms: list[str]) -> dict[str, str]:
    return {a: hashlib.new(a.lower(), data).hexdigest() for a in algorithms}


# === FIXTURES: Settings and services ===


@pytest.fixture
def empty_digests() -> dict[str, str]:
    return dict(EMPTY_DIGESTS)


@pytest.fixture
def reference_digests():
    """Reference digests computed in one shot with hashlib."""
    return _expected_digests


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any .env, with a small chunk size."""
    return Settings(
        _env_file=None,
        hash_chunk_size=4096,
        cache_root=tmp_path / "cache",
    )


@pytest.fixture
def cache() -> MemoryCacheStore:
    return MemoryCacheStore(max_entries=1000)


@pytest.fixture
def service(settings: Settings, cache: MemoryCacheStore) -> HashService:
    return HashService(settings=settings, cache=cache)


# === FIXTURES: Sample files ===


@pytest.fixture
def empty_file(tmp_path: Path) -> Path:
    p = tmp_path / "empty.bin"
    p.write_bytes(b"")
    return p


@pytest.fixture
def sample_bytes() -> bytes:
    """~10 KiB spanning several 4 KiB chunks, not chunk-aligned."""
    return bytes(range(256)) * 40 + b"tail"


@pytest.fixture
def sample_file(tmp_path: Path, sample_bytes: bytes) -> Path:
    p = tmp_path / "sample.bin"
    p.write_bytes(sample_bytes)
    return p
