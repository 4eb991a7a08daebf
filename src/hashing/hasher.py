# src/hashing/hasher.py
"""Streaming multi-digest computer.

Reads a file once, in large sequential chunks, and feeds every chunk to
every requested digest stream before reading the next one. Each chunk read
is an ``await`` point, so many files can be hashed cooperatively on one
event loop.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import aiofiles

from digestor.config.settings import DEFAULT_CHUNK_SIZE
from digestor.hashing.algorithms import normalize_algorithms, resolve
from digestor.hashing.errors import (
    FileMissingError,
    FileUnreadableError,
    ReadFailureError,
)

logger = logging.getLogger(__name__)


async def compute_hashes(
    path: str | os.PathLike[str],
    algorithms: Iterable[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> dict[str, str]:
    """Compute every requested digest of ``path`` in a single read pass.

    Args:
        path: File to hash.
        algorithms: Algorithm names (case-insensitive, duplicates collapse).
        chunk_size: Bytes per read.

    Returns:
        Mapping canonical algorithm name -> lowercase hex digest, one entry
        per requested algorithm.

    Raises:
        UnsupportedAlgorithmError: Before the file is opened.
        InvalidRequestError: If ``algorithms`` is empty.
        FileMissingError: If ``path`` does not exist.
        FileUnreadableError: If ``path`` is a directory or not readable.
        ReadFailureError: If reading fails part-way.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be a positive integer")

    # Resolve everything up front: no partial hashing on a bad name.
    names = normalize_algorithms(algorithms)
    streams = {name: resolve(name)() for name in names}

    try:
        file_path = Path(path)
    except TypeError as exc:
        raise FileUnreadableError(f"Invalid file path: {path!r}") from exc

    try:
        async with aiofiles.open(file_path, "rb") as handle:
            total = await _feed(handle, streams.values(), chunk_size, file_path)
    except FileNotFoundError as exc:
        raise FileMissingError(f"File not found: {file_path}") from exc
    except (IsADirectoryError, NotADirectoryError, PermissionError) as exc:
        raise FileUnreadableError(f"File is not readable: {file_path} ({exc})") from exc
    except OSError as exc:
        raise FileUnreadableError(f"Cannot open {file_path}: {exc}") from exc
    except ValueError as exc:
        # e.g. embedded NUL byte
        raise FileUnreadableError(f"Invalid file path: {file_path!r} ({exc})") from exc

    logger.debug(
        "Hashed %s (%d bytes) with %s", file_path, total, ",".join(names),
    )
    return {name: stream.hexdigest() for name, stream in streams.items()}


async def _feed(
    handle: Any,
    streams: Iterable[Any],
    chunk_size: int,
    file_path: Path,
) -> int:
    """Feed every chunk of ``handle`` to all ``streams``. Returns bytes read."""
    streams = list(streams)
    total = 0
    while True:
        try:
            chunk = await handle.read(chunk_size)
        except OSError as exc:
            raise ReadFailureError(
                f"Read failed for {file_path} after {total} bytes: {exc}"
            ) from exc
        if not chunk:
            break
        for stream in streams:
            stream.update(chunk)
        total += len(chunk)
    return total
