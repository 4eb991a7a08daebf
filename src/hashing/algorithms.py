# src/hashing/algorithms.py
"""Digest algorithm registry.

Maps user-facing algorithm names (case-insensitive) to hashlib digest
constructors. Pure lookups, no I/O.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable
from typing import Any

from digestor.hashing.errors import InvalidRequestError, UnsupportedAlgorithmError

DigestStreamFactory = Callable[[], Any]

# Canonical (upper-case) name -> hashlib constructor
ALGORITHM_REGISTRY: dict[str, DigestStreamFactory] = {
    "MD5": hashlib.md5,
    "SHA1": hashlib.sha1,
    "SHA256": hashlib.sha256,
    "SHA512": hashlib.sha512,
}


def canonical_name(name: str) -> str:
    """Return the canonical form of ``name`` or raise UnsupportedAlgorithmError."""
    if not isinstance(name, str):
        raise UnsupportedAlgorithmError(repr(name))
    key = name.strip().upper()
    if key not in ALGORITHM_REGISTRY:
        raise UnsupportedAlgorithmError(name)
    return key


def resolve(name: str) -> DigestStreamFactory:
    """Return the digest stream factory registered for ``name``.

    Raises:
        UnsupportedAlgorithmError: If ``name`` is not a supported algorithm.
    """
    return ALGORITHM_REGISTRY[canonical_name(name)]


def normalize_algorithms(names: Iterable[str]) -> list[str]:
    """Canonicalize, de-duplicate and sort a requested algorithm set.

    Every name is validated before anything is returned, so a single bad
    name rejects the whole request.

    Raises:
        InvalidRequestError: If no algorithm is requested.
        UnsupportedAlgorithmError: On the first unknown name.
    """
    if isinstance(names, str):
        names = [names]
    canonical = {canonical_name(n) for n in names}
    if not canonical:
        raise InvalidRequestError("At least one hash algorithm must be requested")
    return sorted(canonical)


def supported_algorithms() -> list[str]:
    """Return the sorted list of supported algorithm names."""
    return sorted(ALGORITHM_REGISTRY)
