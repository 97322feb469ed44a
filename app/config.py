"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for file ingestion.

    ``strict_numeric`` rejects records whose numeric fields do not parse
    instead of storing them as zero. ``atomic_runs`` commits a whole run in
    one transaction instead of once per batch.
    """

    batch_size: int = 1000
    stored_error_limit: int = 100
    response_error_limit: int = 20
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    upload_dir: str = "data/uploads/ingestion"
    strict_numeric: bool = False
    atomic_runs: bool = False
    log_validation_errors: bool = True
    mapping_overrides_path: str | None = None


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return IngestionSettings(
        batch_size=max(1, _get_int_env("INGEST_BATCH_SIZE", 1000)),
        stored_error_limit=max(1, _get_int_env("INGEST_STORED_ERROR_LIMIT", 100)),
        response_error_limit=max(1, _get_int_env("INGEST_RESPONSE_ERROR_LIMIT", 20)),
        max_upload_bytes=max(1, _get_int_env("INGEST_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        upload_dir=_get_str_env("INGEST_UPLOAD_DIR", "data/uploads/ingestion"),
        strict_numeric=_get_bool_env("INGEST_STRICT_NUMERIC", False),
        atomic_runs=_get_bool_env("INGEST_ATOMIC_RUNS", False),
        log_validation_errors=_get_bool_env("INGEST_LOG_VALIDATION_ERRORS", True),
        mapping_overrides_path=_get_optional_str_env("INGESTION_MAPPING_OVERRIDES_PATH"),
    )
