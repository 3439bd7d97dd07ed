"""
Environment-driven settings.

Secrets (the store endpoint and its credential) have no defaults: the app
refuses to start without them. Everything else falls back to a local-dev
value.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_PORT = 3000
DEFAULT_CORS_ORIGIN = "http://localhost:5173"
DEFAULT_DATASET_PATH = "data/heavy_metals_data.csv"
DEFAULT_REPORTS_DIR = "data_reports"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_RECENT_REPORTS_LIMIT = 4


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _required(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise RuntimeError(f"{name} is not set.")
    return value


def database_url() -> str:
    return _required("DATABASE_URL")


def database_password() -> str:
    return _required("DATABASE_PASSWORD")


def validate_required() -> None:
    """
    Fail fast on missing secrets. Called once during app startup.
    """
    database_url()
    database_password()


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def cors_origin() -> str:
    return os.environ.get("CORS_ORIGIN", DEFAULT_CORS_ORIGIN).strip() or DEFAULT_CORS_ORIGIN


def dataset_path() -> Path:
    return Path(os.environ.get("DATASET_PATH", "").strip() or DEFAULT_DATASET_PATH)


def reports_dir() -> Path:
    return Path(os.environ.get("REPORTS_DIR", "").strip() or DEFAULT_REPORTS_DIR)


def max_upload_bytes() -> int:
    value = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


def recent_reports_limit() -> int:
    value = _env_int("RECENT_REPORTS_LIMIT", DEFAULT_RECENT_REPORTS_LIMIT)
    return value if value > 0 else DEFAULT_RECENT_REPORTS_LIMIT
