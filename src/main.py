# src/main.py
"""CLI entry point: hash, batch, algorithms commands.

Usage:
    digestor hash <file> [-a ALGO ...] [--json]
    digestor batch <path-or-directory> ... [-a ALGO ...] [--json]
    digestor algorithms
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from digestor.version import __version__

if TYPE_CHECKING:
    from digestor.api.models import BatchHashResponse
    from digestor.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from digestor.config.settings import ConfigurationError, Settings

    try:
        settings = Settings()
    except (ConfigurationError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="digestor",
        description=f"digestor v{__version__} - single-pass multi-algorithm file hashing",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- hash ---
    p_hash = subparsers.add_parser("hash", help="Hash a single file")
    p_hash.add_argument("file", type=Path, help="Path to file")
    _add_common_options(p_hash)
    p_hash.set_defaults(func=_cmd_hash)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Hash many files (directories are listed, not recursed)",
    )
    p_batch.add_argument("paths", type=Path, nargs="+", help="Files or directories")
    p_batch.add_argument(
        "-j", "--jobs", type=int, default=None,
        help="Files hashed concurrently per group (default: min(2 x cores, 8))",
    )
    _add_common_options(p_batch)
    p_batch.set_defaults(func=_cmd_batch)

    # --- algorithms ---
    p_algos = subparsers.add_parser("algorithms", help="List supported algorithms")
    p_algos.set_defaults(func=_cmd_algorithms)

    return parser


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-a", "--algorithm", dest="algorithms", action="append", default=None,
        help="Algorithm to compute (repeatable; default: DEFAULT_ALGORITHMS)",
    )
    p.add_argument(
        "--json", action="store_true", help="Print the response as JSON",
    )


async def _cmd_hash(args: argparse.Namespace, settings: Settings) -> int:
    """Hash one file and print its digests."""
    from digestor.api.facade import compute_file_hash
    from digestor.hashing.service import HashService

    algorithms = args.algorithms or settings.default_algorithms_list
    service = HashService(settings=settings)
    file_path = args.file.expanduser().absolute()
    response = await compute_file_hash(file_path, algorithms, service=service)

    if args.json:
        print(response.model_dump_json(indent=2, exclude_none=True))
    elif response.success:
        for name, digest in sorted(response.results.items()):  # type: ignore[union-attr]
            print(f"{name.upper():<7} {digest}  {file_path}")
    else:
        print(f"error: {response.error}", file=sys.stderr)
    return 0 if response.success else 1


async def _cmd_batch(args: argparse.Namespace, settings: Settings) -> int:
    """Hash every given file, listing directories one level deep."""
    from digestor.api.facade import compute_batch_hashes
    from digestor.batch.scanner import list_directory
    from digestor.hashing.service import HashService

    paths: list[Path] = []
    for p in args.paths:
        p = p.expanduser().absolute()
        paths.extend(list_directory(p) if p.is_dir() else [p])

    algorithms = args.algorithms or settings.default_algorithms_list
    service = HashService(settings=settings)
    response = await compute_batch_hashes(
        paths, algorithms, service=service, max_parallelism=args.jobs,
    )

    if args.json:
        print(response.model_dump_json(indent=2, exclude_none=True))
        return 0 if _all_ok(response) else 1

    if not response.success:
        print(f"error: {response.error}", file=sys.stderr)
        return 1

    failed = 0
    for item in response.results or []:
        if item.success:
            for name, digest in sorted(item.results.items()):  # type: ignore[union-attr]
                print(f"{name.upper():<7} {digest}  {item.file_path}")
        else:
            failed += 1
            print(f"error: {item.file_path}: {item.error}", file=sys.stderr)

    print("\nBatch complete:", file=sys.stderr)
    print(f"  Files:   {len(response.results or [])}", file=sys.stderr)
    print(f"  Failed:  {failed}", file=sys.stderr)
    print(f"  Cache:   {service.hits} hits, {service.misses} misses", file=sys.stderr)
    return 0 if failed == 0 else 1


async def _cmd_algorithms(args: argparse.Namespace, settings: Settings) -> int:
    """Print supported algorithm names."""
    from digestor.hashing.algorithms import supported_algorithms

    for name in supported_algorithms():
        print(name)
    return 0


def _all_ok(response: BatchHashResponse) -> bool:
    if not response.success:
        return False
    return all(item.success for item in response.results or [])


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from digestor.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
