# tests/unit/hashing/test_unit_hasher.py
"""Tests for hashing/hasher.py: single-pass streaming multi-digest computation."""

from __future__ import annotations

import asyncio
import hashlib
import io
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from digestor.hashing.errors import (
    FileMissingError,
    FileUnreadableError,
    InvalidRequestError,
    ReadFailureError,
    UnsupportedAlgorithmError,
)
from digestor.hashing.hasher import compute_hashes


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _CountingHandle:
    """Async file stand-in that records every read."""

    def __init__(self, data: bytes, fail_on_read: int | None = None) -> None:
        self._buf = io.BytesIO(data)
        self._fail_on_read = fail_on_read
        self.reads = 0
        self.bytes_read = 0

    async def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self._fail_on_read is not None and self.reads == self._fail_on_read:
            raise OSError(5, "Input/output error")
        chunk = self._buf.read(size)
        self.bytes_read += len(chunk)
        return chunk


class _FakeOpen:
    """Replacement for aiofiles.open serving one in-memory handle."""

    def __init__(self, handle) -> None:
        self.handle = handle
        self.calls: list[tuple[object, str]] = []
        self.closed = False

    def __call__(self, path, mode="r", *args, **kwargs):
        self.calls.append((path, mode))
        return self

    async def __aenter__(self):
        return self.handle

    async def __aexit__(self, *exc_info):
        self.closed = True
        return False


class _BlockingHandle:
    """Handle whose second read never completes."""

    def __init__(self) -> None:
        self.reads = 0
        self.started = asyncio.Event()

    async def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self.reads == 1:
            return b"x" * size
        self.started.set()
        await asyncio.Event().wait()
        return b""


# ---------------------------------------------------------------------------
# Known vectors and correctness
# ---------------------------------------------------------------------------

class TestKnownVectors:
    @pytest.mark.asyncio
    async def test_empty_file(self, empty_file: Path, empty_digests: dict[str, str]):
        result = await compute_hashes(empty_file, ["MD5", "SHA1", "SHA256"])
        assert result == empty_digests

    @pytest.mark.asyncio
    async def test_empty_file_sha512(self, empty_file: Path):
        result = await compute_hashes(empty_file, ["SHA512"])
        assert result == {"SHA512": hashlib.sha512(b"").hexdigest()}

    @pytest.mark.asyncio
    async def test_multi_chunk_matches_one_shot(
        self, sample_file: Path, sample_bytes: bytes, reference_digests,
    ):
        algos = ["MD5", "SHA1", "SHA256", "SHA512"]
        result = await compute_hashes(sample_file, algos, chunk_size=1000)
        assert result == reference_digests(sample_bytes, algos)

    @pytest.mark.asyncio
    async def test_digests_are_lowercase_hex(self, sample_file: Path):
        result = await compute_hashes(sample_file, ["SHA256"])
        digest = result["SHA256"]
        assert digest == digest.lower()
        int(digest, 16)

    @pytest.mark.asyncio
    async def test_deterministic(self, sample_file: Path):
        first = await compute_hashes(sample_file, ["MD5", "SHA256"], chunk_size=777)
        second = await compute_hashes(sample_file, ["MD5", "SHA256"], chunk_size=777)
        assert first == second


class TestAlgorithmHandling:
    @pytest.mark.asyncio
    async def test_one_entry_per_algorithm(self, sample_file: Path):
        result = await compute_hashes(sample_file, ["sha256", "MD5", "Sha256"])
        assert set(result) == {"MD5", "SHA256"}

    @pytest.mark.asyncio
    async def test_empty_algorithm_list(self, sample_file: Path):
        with pytest.raises(InvalidRequestError):
            await compute_hashes(sample_file, [])

    @pytest.mark.asyncio
    async def test_invalid_chunk_size(self, sample_file: Path):
        with pytest.raises(ValueError, match="chunk_size"):
            await compute_hashes(sample_file, ["MD5"], chunk_size=0)


# ---------------------------------------------------------------------------
# Single pass and fail fast
# ---------------------------------------------------------------------------

class TestSinglePass:
    @pytest.mark.asyncio
    async def test_one_open_one_sequential_read(self, sample_bytes: bytes, reference_digests):
        handle = _CountingHandle(sample_bytes)
        fake_open = _FakeOpen(handle)
        algos = ["MD5", "SHA1", "SHA256", "SHA512"]

        with patch("digestor.hashing.hasher.aiofiles.open", fake_open):
            result = await compute_hashes("/virtual/file.bin", algos, chunk_size=1024)

        assert len(fake_open.calls) == 1
        assert fake_open.calls[0][1] == "rb"
        assert handle.bytes_read == len(sample_bytes)
        # ceil(len / chunk) data reads plus the final empty read
        assert handle.reads == -(-len(sample_bytes) // 1024) + 1
        assert result == reference_digests(sample_bytes, algos)
        assert fake_open.closed is True

    @pytest.mark.asyncio
    async def test_unsupported_algorithm_performs_no_io(self):
        fake_open = _FakeOpen(_CountingHandle(b"data"))
        with patch("digestor.hashing.hasher.aiofiles.open", fake_open):
            with pytest.raises(UnsupportedAlgorithmError) as exc_info:
                await compute_hashes("/virtual/file.bin", ["SHA256", "CRC32"])
        assert fake_open.calls == []
        assert exc_info.value.code == "UnsupportedAlgorithm"
        assert exc_info.value.algorithm == "CRC32"


# ---------------------------------------------------------------------------
# Errors and resource release
# ---------------------------------------------------------------------------

class TestErrors:
    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileMissingError) as exc_info:
            await compute_hashes(tmp_path / "nope.bin", ["MD5"])
        assert exc_info.value.code == "FileNotFound"

    @pytest.mark.asyncio
    async def test_directory_is_unreadable(self, tmp_path: Path):
        with pytest.raises(FileUnreadableError) as exc_info:
            await compute_hashes(tmp_path, ["MD5"])
        assert exc_info.value.code == "FileUnreadable"

    @pytest.mark.asyncio
    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    async def test_permission_denied(self, sample_file: Path):
        sample_file.chmod(0)
        try:
            with pytest.raises(FileUnreadableError):
                await compute_hashes(sample_file, ["MD5"])
        finally:
            sample_file.chmod(0o644)

    @pytest.mark.asyncio
    async def test_read_failure_mid_stream_closes_file(self, sample_bytes: bytes):
        fake_open = _FakeOpen(_CountingHandle(sample_bytes, fail_on_read=2))
        with patch("digestor.hashing.hasher.aiofiles.open", fake_open):
            with pytest.raises(ReadFailureError) as exc_info:
                await compute_hashes("/virtual/file.bin", ["MD5"], chunk_size=1024)
        assert exc_info.value.code == "IOFailure"
        assert fake_open.closed is True

    @pytest.mark.asyncio
    async def test_cancellation_closes_file(self):
        handle = _BlockingHandle()
        fake_open = _FakeOpen(handle)
        with patch("digestor.hashing.hasher.aiofiles.open", fake_open):
            task = asyncio.create_task(
                compute_hashes("/virtual/big.bin", ["SHA256"], chunk_size=16)
            )
            await handle.started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
        assert fake_open.closed is True

    @pytest.mark.asyncio
    async def test_embedded_nul_is_unreadable(self, tmp_path: Path):
        with pytest.raises(FileUnreadableError) as exc_info:
            await compute_hashes(f"{tmp_path}/bad\x00name", ["MD5"])
        assert exc_info.value.code == "FileUnreadable"

    @pytest.mark.asyncio
    async def test_non_path_is_unreadable(self):
        with pytest.raises(FileUnreadableError):
            await compute_hashes(12.5, ["MD5"])  # type: ignore[arg-type]
