"""Store outages surface as 503 with a Retry-After hint."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from coursetrack.api.dependencies import get_tracking_service
from coursetrack.core.errors import StoreUnavailableError
from coursetrack.main import app
from coursetrack.repos.completion_repo import InMemoryCompletionRepo
from coursetrack.repos.position_repo import InMemoryPositionRepo
from coursetrack.services.cache import InMemoryCacheService
from coursetrack.services.tracking_service import TrackingService


class _DownActivityRepo:
    async def append_unless_recent(self, record, window_seconds):
        raise StoreUnavailableError("append activity failed: store unavailable")

    async def query(self, user_id, unit_id, section_id=None):
        raise StoreUnavailableError("query activities failed: store unavailable")

    async def list_units(self, user_id):
        raise StoreUnavailableError()

    async def list_sections(self, unit_id):
        raise StoreUnavailableError()


@pytest.fixture
def down_client() -> Iterator[TestClient]:
    service = TrackingService(
        _DownActivityRepo(),
        InMemoryCompletionRepo(),
        InMemoryPositionRepo(),
        InMemoryCacheService(),
    )
    app.dependency_overrides[get_tracking_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.pop(get_tracking_service, None)


def test_append_returns_503_with_retry_after(down_client: TestClient) -> None:
    resp = down_client.post(
        "/v1/users/42/units/1337/activities",
        json={"section_id": "overview", "activity_type": "video_watch"},
    )
    assert resp.status_code == 503
    assert resp.headers["retry-after"] == "5"
    assert resp.json()["code"] == "store_unavailable"


def test_summary_returns_503(down_client: TestClient) -> None:
    resp = down_client.get("/v1/users/42/units/1337/summary")
    assert resp.status_code == 503


def test_validation_runs_before_the_store(down_client: TestClient) -> None:
    resp = down_client.post(
        "/v1/users/42/units/1337/activities",
        json={"section_id": "", "activity_type": "video_watch"},
    )
    assert resp.status_code == 422
