"""
Dataset queries used by the router.

Loading failures are mapped to 500s here so the router stays thin.
"""

from __future__ import annotations

import logging

from core.errors import ApiError

from .cache import KEY_FIELD, DatasetCache, DatasetError, Row

logger = logging.getLogger(__name__)


def filter_by_key(rows: list[Row], query: str | None, key_field: str = KEY_FIELD) -> list[Row]:
    """
    Rows whose key field equals `query`, ignoring case.

    An empty or missing query matches nothing.
    """
    if not query:
        return []
    target = query.lower()
    return [row for row in rows if (row.get(key_field) or "").lower() == target]


async def _load(cache: DatasetCache) -> list[Row]:
    try:
        return await cache.load()
    except DatasetError as e:
        logger.warning("dataset_load_failed path=%s error=%s", cache.path, e)
        raise ApiError(500, "Failed to load data", details=str(e)) from e


async def list_keys(cache: DatasetCache) -> list[str]:
    await _load(cache)
    return cache.keys


async def rows_for_key(cache: DatasetCache, value: str) -> dict:
    rows = await _load(cache)
    matches = filter_by_key(rows, value, cache.key_field)
    if not matches:
        raise ApiError(404, "State not found", state=value)
    return {"state": value, "count": len(matches), "rows": matches}
