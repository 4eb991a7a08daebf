# src/config/settings.py
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for hashing, cache, batch and logging settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from digestor.logging.handlers import parse_size

# 256 MiB per read: amortizes per-chunk overhead on very large files.
DEFAULT_CHUNK_SIZE = 256 * 1024 * 1024

_KNOWN_ALGORITHMS = {"MD5", "SHA1", "SHA256", "SHA512"}


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Hashing ===
    hash_chunk_size: int = DEFAULT_CHUNK_SIZE
    default_algorithms: str = "SHA256"

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "json"] = "memory"
    cache_max_entries: int = 1000
    cache_root: Path = Path("~/.digestor/cache")
    cache_check_freshness: bool = True

    # === Batch ===
    batch_max_parallelism: int = 0  # 0 = derive from CPU count
    batch_parallelism_ceiling: int = 8

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("log_rotation")
    @classmethod
    def validate_log_rotation(cls, v: str) -> str:  # noqa: N805
        """LOG_ROTATION must look like '10MB'."""
        parse_size(v)
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.hash_chunk_size <= 0:
            errors.append("HASH_CHUNK_SIZE must be > 0")

        if self.cache_max_entries < 1:
            errors.append("CACHE_MAX_ENTRIES must be >= 1")

        if self.batch_max_parallelism < 0:
            errors.append("BATCH_MAX_PARALLELISM must be >= 0")

        if self.batch_parallelism_ceiling < 1:
            errors.append("BATCH_PARALLELISM_CEILING must be >= 1")

        names = self.default_algorithms_list
        if not names:
            errors.append("DEFAULT_ALGORITHMS must name at least one algorithm")
        unknown = [n for n in names if n not in _KNOWN_ALGORITHMS]
        if unknown:
            errors.append(
                f"DEFAULT_ALGORITHMS has unsupported names: {', '.join(unknown)}"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def default_algorithms_list(self) -> list[str]:
        """Parse comma-separated default algorithms."""
        return [
            a.strip().upper() for a in self.default_algorithms.split(",") if a.strip()
        ]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
