# tests/integration/api/test_int_api.py
"""Integration tests for the API subsystem.

Covers: api/facade.py, api/models.py against real files on disk.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from digestor.api.facade import compute_batch_hashes, compute_file_hash
from digestor.api.models import BatchHashResponse, HashResponse
from digestor.config.settings import Settings
from digestor.hashing.service import HashService

pytestmark = pytest.mark.integration


@pytest.fixture
def api_service() -> HashService:
    return HashService(settings=Settings(_env_file=None, hash_chunk_size=1024))


class TestComputeFileHash:

    @pytest.mark.asyncio
    async def test_all_algorithms(self, tmp_path: Path, api_service: HashService):
        data = b"The quick brown fox jumps over the lazy dog" * 100
        f = tmp_path / "fox.txt"
        f.write_bytes(data)

        response = await compute_file_hash(
            f, ["sha512", "md5", "SHA256", "Sha1"], service=api_service,
        )

        assert isinstance(response, HashResponse)
        assert response.success is True
        assert response.error is None
        assert response.results == {
            "sha512": hashlib.sha512(data).hexdigest(),
            "md5": hashlib.md5(data).hexdigest(),
            "SHA256": hashlib.sha256(data).hexdigest(),
            "Sha1": hashlib.sha1(data).hexdigest(),
        }

    @pytest.mark.asyncio
    async def test_directory_reported_unreadable(self, tmp_path: Path, api_service: HashService):
        response = await compute_file_hash(tmp_path, ["MD5"], service=api_service)
        assert response.success is False
        assert response.error_code == "FileUnreadable"
        assert response.results is None

    @pytest.mark.asyncio
    async def test_empty_algorithm_list(self, tmp_path: Path, api_service: HashService):
        f = tmp_path / "a.bin"
        f.write_bytes(b"a")
        response = await compute_file_hash(f, [], service=api_service)
        assert response.success is False
        assert response.error_code == "InvalidRequest"

    @pytest.mark.asyncio
    async def test_response_serializes(self, tmp_path: Path, api_service: HashService):
        f = tmp_path / "a.bin"
        f.write_bytes(b"")
        response = await compute_file_hash(f, ["MD5"], service=api_service)
        data = json.loads(response.model_dump_json())
        assert data["results"] == {"MD5": "d41d8cd98f00b204e9800998ecf8427e"}


class TestComputeBatchHashes:

    @pytest.mark.asyncio
    async def test_unsupported_algorithm_fails_every_item(
        self, tmp_path: Path, api_service: HashService,
    ):
        files = []
        for name in ("a", "b", "c"):
            p = tmp_path / name
            p.write_bytes(name.encode())
            files.append(p)

        response = await compute_batch_hashes(files, ["SHA256", "CRC32"], service=api_service)

        assert isinstance(response, BatchHashResponse)
        assert response.success is True
        assert [item.error_code for item in response.results] == ["UnsupportedAlgorithm"] * 3
        assert api_service.misses == 0

    @pytest.mark.asyncio
    async def test_single_file_and_batch_share_cache(
        self, tmp_path: Path, api_service: HashService,
    ):
        f = tmp_path / "shared.bin"
        f.write_bytes(b"shared")

        single = await compute_file_hash(f, ["SHA1"], service=api_service)
        batch = await compute_batch_hashes([f], ["sha1"], service=api_service)

        assert batch.results[0].results == {"sha1": single.results["SHA1"]}
        assert api_service.misses == 1
        assert api_service.hits == 1

    @pytest.mark.asyncio
    async def test_empty_batch(self, api_service: HashService):
        response = await compute_batch_hashes([], ["MD5"], service=api_service)
        assert response.success is True
        assert response.results == []
