"""Every response carries an X-Request-ID, generated or echoed."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def test_request_id_generated_when_not_provided(client: TestClient) -> None:
    resp = client.get("/health")
    req_id = resp.headers.get("x-request-id")
    assert req_id is not None
    uuid.UUID(req_id)  # raises ValueError if invalid


def test_request_id_echoed_when_provided(client: TestClient) -> None:
    custom_id = "lms-batch-import-123"
    resp = client.get("/health", headers={"X-Request-ID": custom_id})
    assert resp.headers.get("x-request-id") == custom_id


def test_request_id_present_on_error_responses(client: TestClient) -> None:
    resp = client.post(
        "/v1/users/42/units/1337/activities",
        json={"section_id": "", "activity_type": "video_watch"},
        headers={"X-Request-ID": "bad-input-1"},
    )
    assert resp.status_code == 422
    assert resp.headers.get("x-request-id") == "bad-input-1"
    assert resp.json()["request_id"] == "bad-input-1"
