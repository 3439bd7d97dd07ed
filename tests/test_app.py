"""
App-level behaviour: startup with an unreachable store, CORS, and the error
body shape for framework-raised errors.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core import config, db
from dataset.cache import DatasetCache
from dataset.router import get_dataset_cache
from main import app

ALLOWED_ORIGIN = config.DEFAULT_CORS_ORIGIN


class TestStoreUnavailableAtStartup:
    @pytest.fixture
    def unreachable_store(self, monkeypatch: pytest.MonkeyPatch, dataset_cache: DatasetCache):
        # Nothing listens on port 1, so every connect attempt is refused.
        monkeypatch.setenv("DATABASE_URL", "postgresql://app@127.0.0.1:1/app")
        monkeypatch.setenv("DATABASE_PASSWORD", "pw")
        app.dependency_overrides[get_dataset_cache] = lambda: dataset_cache
        try:
            yield
        finally:
            app.dependency_overrides.clear()

    def test_health_and_dataset_still_served(self, unreachable_store) -> None:
        with TestClient(app) as client:
            resp = client.get("/api/health")
            assert resp.status_code == 200
            assert resp.json()["status"] == "ok"
            assert client.get("/api/state/Gujarat").status_code == 200
        assert db._pool is None

    def test_store_endpoints_fail_per_request(self, unreachable_store) -> None:
        with TestClient(app) as client:
            resp = client.get("/api/recent-reports")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to fetch recent reports"
        assert "details" in resp.json()


class TestCors:
    def test_allowed_origin_is_echoed_with_credentials(self, client: TestClient) -> None:
        resp = client.get("/api/health", headers={"Origin": ALLOWED_ORIGIN})
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_preflight_for_allowed_origin(self, client: TestClient) -> None:
        resp = client.options(
            "/api/report",
            headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_foreign_origin_gets_no_allow_origin(self, client: TestClient) -> None:
        resp = client.get("/api/health", headers={"Origin": "http://evil.example"})
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers

        resp = client.options(
            "/api/report",
            headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code == 400
        assert "access-control-allow-origin" not in resp.headers


class TestErrorShape:
    def test_unknown_route(self, client: TestClient) -> None:
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_wrong_method(self, client: TestClient) -> None:
        resp = client.delete("/api/health")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method Not Allowed"}
        assert "GET" in resp.headers["allow"]

    def test_text_part_in_place_of_file(self, client: TestClient) -> None:
        resp = client.post(
            "/api/report",
            data={"user_id": "u1", "title": "T", "file": "not-a-file"},
            files={"other": ("x.csv", b"a\n", "text/csv")},
        )
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "Invalid request"
        assert "file" in body["details"]
        assert "detail" not in body
