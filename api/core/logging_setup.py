"""Logging configuration for the API process."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.strip().upper(), logging.INFO)


def configure_logging() -> None:
    """Configure root logging using LOG_LEVEL and a concise format."""
    level = _resolve_level(os.environ.get("LOG_LEVEL", "INFO"))
    root_logger = logging.getLogger()

    if root_logger.handlers:
        # Already configured (e.g. by uvicorn); only adjust the level.
        root_logger.setLevel(level)
        return

    logging.basicConfig(level=level, format=LOG_FORMAT)
