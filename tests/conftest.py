from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from coursetrack.api.dependencies import activity_repo, completion_repo, position_repo
from coursetrack.main import app
from coursetrack.models.activity import ActivityRecord
from coursetrack.services.cache import cache_service

# Ensure repo root is on sys.path so `import coursetrack` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reset_activity_state() -> None:
    """Clear the shared in-memory stores between tests."""
    activity_repo._records.clear()
    completion_repo._markers.clear()
    position_repo._by_unit.clear()


@pytest.fixture(autouse=True)
def reset_cache() -> None:
    """Clear cache between tests."""
    if hasattr(cache_service, "_store"):
        cache_service._store.clear()  # type: ignore[union-attr]


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class FakeClock:
    """Manually advanced epoch-seconds clock for the tracking service."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def make_activity(
    section_id: str,
    activity_type: str = "video_watch",
    *,
    created_at: int = 1_700_000_000,
    user_id: str = "42",
    unit_id: str = "1337",
    payload: dict | None = None,
) -> ActivityRecord:
    return ActivityRecord.new(
        user_id=user_id,
        unit_id=unit_id,
        section_id=section_id,
        activity_type=activity_type,
        created_at=created_at,
        payload=payload,
    )


def make_activities(
    section_id: str, activity_type: str, count: int, *, start: int = 1_700_000_000
) -> list[ActivityRecord]:
    """`count` records of one type, spaced an hour apart (outside any dedup window)."""
    return [
        make_activity(section_id, activity_type, created_at=start + i * 3600)
        for i in range(count)
    ]
