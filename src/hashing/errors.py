# src/hashing/errors.py
"""Hashing error taxonomy.

Every error carries a stable ``code`` so callers can report failures
without depending on exception class names.
"""

from __future__ import annotations


class HashingError(Exception):
    """Base class for all per-file hashing failures."""

    code = "HashingError"


class UnsupportedAlgorithmError(HashingError):
    """Requested algorithm is not in the supported set. Raised before any I/O."""

    code = "UnsupportedAlgorithm"

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"Unsupported hash algorithm: {algorithm}")
        self.algorithm = algorithm


class InvalidRequestError(HashingError):
    """Request is malformed (e.g. empty algorithm list)."""

    code = "InvalidRequest"


class FileMissingError(HashingError):
    """Path does not exist."""

    code = "FileNotFound"


class FileUnreadableError(HashingError):
    """Path is a directory or cannot be opened for reading."""

    code = "FileUnreadable"


class ReadFailureError(HashingError):
    """Read failed part-way through the file."""

    code = "IOFailure"
