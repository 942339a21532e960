"""Cache hit/miss/invalidation tests for the unit summary endpoint.

1. First GET is a cache miss (computed from the activity log)
2. Second GET is a cache hit
3. An accepted activity invalidates the entry
4. Different learners have isolated entries
"""

from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from coursetrack.services.cache import cache_service, summary_generation

_SUMMARY = "/v1/users/{user_id}/units/1337/summary"


def _sample(operation: str) -> float:
    value = REGISTRY.get_sample_value("cache_operations_total", {"operation": operation})
    return value if value is not None else 0.0


def _generation(user_id: str = "42") -> int:
    return asyncio.run(summary_generation(cache_service, user_id, "1337"))


def _post(client: TestClient, user_id: str, section_id: str, activity_type: str):
    return client.post(
        f"/v1/users/{user_id}/units/1337/activities",
        json={"section_id": section_id, "activity_type": activity_type},
    )


def test_cache_miss_then_hit(client: TestClient) -> None:
    _post(client, "42", "overview", "video_watch")
    misses, hits = _sample("miss"), _sample("hit")

    resp1 = client.get(_SUMMARY.format(user_id="42"))
    resp2 = client.get(_SUMMARY.format(user_id="42"))

    assert resp1.json() == resp2.json()
    assert _sample("miss") - misses == 1
    assert _sample("hit") - hits == 1


def test_cache_invalidated_on_new_activity(client: TestClient) -> None:
    _post(client, "42", "overview", "video_watch")
    assert client.get(_SUMMARY.format(user_id="42")).json()["overall_percentage"] == 25

    before = _generation()
    _post(client, "42", "discussion", "comment")
    assert _generation() == before + 1
    assert client.get(_SUMMARY.format(user_id="42")).json()["overall_percentage"] == 50


def test_cache_invalidated_on_manual_completion(client: TestClient) -> None:
    client.get(_SUMMARY.format(user_id="42"))
    misses = _sample("miss")
    client.post("/v1/users/42/units/1337/completions", json={"section_id": "task"})
    assert _generation() == 1
    client.get(_SUMMARY.format(user_id="42"))
    assert _sample("miss") - misses == 1


def test_cache_isolated_per_user(client: TestClient) -> None:
    _post(client, "42", "overview", "video_watch")
    client.get(_SUMMARY.format(user_id="42"))

    other = client.get(_SUMMARY.format(user_id="7")).json()
    assert other["overall_percentage"] == 0
