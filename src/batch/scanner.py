# src/batch/scanner.py
"""Flat directory listing for batch input.

Lists the regular files directly inside a directory. No recursion and no
filtering: deciding which files to hash is the caller's business.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def list_directory(directory: str | Path) -> list[Path]:
    """Return the regular files directly inside ``directory``, sorted by name.

    Raises:
        ValueError: If ``directory`` is not a directory.
    """
    root = Path(directory)
    if not root.is_dir():
        msg = f"Not a directory: {root}"
        raise ValueError(msg)

    files = sorted(p for p in root.iterdir() if p.is_file())
    logger.info("Listed %s: %d files", root, len(files))
    return files
