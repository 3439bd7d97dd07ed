"""
Dataset API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from core import config
from core.errors import ApiError

from . import service
from .cache import DatasetCache

router = APIRouter()

_cache: DatasetCache | None = None


def get_dataset_cache() -> DatasetCache:
    """
    Process-wide cache instance, created on first use from DATASET_PATH.
    """
    global _cache
    if _cache is None:
        _cache = DatasetCache(config.dataset_path())
    return _cache


@router.get("/api/health")
async def health(cache: DatasetCache = Depends(get_dataset_cache)) -> dict:
    return {"status": "ok", "loaded": cache.is_loaded, "rows": cache.row_count}


@router.get("/api/states")
async def list_states(cache: DatasetCache = Depends(get_dataset_cache)) -> list[str]:
    return await service.list_keys(cache)


@router.get("/api/data")
async def data_by_query(
    state: str | None = Query(default=None),
    cache: DatasetCache = Depends(get_dataset_cache),
) -> dict:
    """
    Query variant: /api/data?state=Gujarat
    """
    if not state:
        raise ApiError(400, "Missing required query parameter: state")
    return await service.rows_for_key(cache, state)


@router.get("/api/state/{state}")
async def data_by_path(
    state: str,
    cache: DatasetCache = Depends(get_dataset_cache),
) -> dict:
    """
    Path variant: /api/state/Andaman%20%26%20Nicobar%20Islands
    """
    return await service.rows_for_key(cache, state)
