"""
Shared fixtures.

The app is exercised through FastAPI's TestClient without entering its
lifespan, so no database pool is opened. The dataset cache, report store and
blob store are swapped in through `app.dependency_overrides`.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dataset.cache import DatasetCache
from dataset.router import get_dataset_cache
from main import app
from reports.repository import get_report_store
from reports.storage import BlobStore, get_blob_store
from tests.helpers import SAMPLE_ROWS, FakeReportStore, write_csv


@pytest.fixture
def csv_path(tmp_path: Path) -> Path:
    return write_csv(tmp_path / "heavy_metals_data.csv", SAMPLE_ROWS)


@pytest.fixture
def dataset_cache(csv_path: Path) -> DatasetCache:
    return DatasetCache(csv_path)


@pytest.fixture
def fake_store() -> FakeReportStore:
    return FakeReportStore()


@pytest.fixture
def reports_dir(tmp_path: Path) -> Path:
    return tmp_path / "data_reports"


@pytest.fixture
def blob_store(reports_dir: Path) -> BlobStore:
    return BlobStore(reports_dir)


@pytest.fixture
def client(dataset_cache: DatasetCache, fake_store: FakeReportStore, blob_store: BlobStore):
    app.dependency_overrides[get_dataset_cache] = lambda: dataset_cache
    app.dependency_overrides[get_report_store] = lambda: fake_store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
