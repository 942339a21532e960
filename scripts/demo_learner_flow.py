"""Demo: walk one learner through a unit using FastAPI TestClient.

Run with:
    python scripts/demo_learner_flow.py

Uses the in-memory stores (no DATABASE_URL / REDIS_URL needed).  The
tools_demo section only reaches 25% here: its four required watches
would be deduplicated when sent within five minutes.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from coursetrack.main import app

USER = "demo-learner"
UNIT = "1337"
BASE = f"/v1/users/{USER}/units/{UNIT}"


def _activity(client: TestClient, section_id: str, activity_type: str) -> dict:
    r = client.post(
        f"{BASE}/activities",
        json={"section_id": section_id, "activity_type": activity_type},
    )
    return r.json()


def main() -> None:
    client = TestClient(app)

    # ── Step 1: watch the overview video ────────────────────────────
    r = _activity(client, "overview", "video_watch")
    print(f"1. overview video_watch     -> {r['percentage']}%  completed={r['completed']}")

    # ── Step 2: the browser fires the same event again ──────────────
    r = _activity(client, "overview", "video_watch")
    print(f"2. overview video_watch     -> duplicate={r['duplicate']}")

    # ── Step 3: one tools demo video ────────────────────────────────
    r = _activity(client, "tools_demo", "video_watch")
    print(f"3. tools_demo video_watch   -> {r['percentage']}%")

    # ── Step 4: post in the discussion, tick the task ───────────────
    r = _activity(client, "discussion", "comment")
    print(f"4. discussion comment       -> {r['percentage']}%  completed={r['completed']}")
    r = _activity(client, "task_final", "manual_check")
    print(f"   task_final manual_check  -> {r['percentage']}%  completed={r['completed']}")

    # ── Step 5: remember where the learner stopped ──────────────────
    client.put(f"{BASE}/position", json={"section_id": "tools_demo"})
    r = client.get(f"/v1/users/{USER}/position").json()
    print(f"5. resume at                -> unit={r['unit_id']} section={r['section_id']}")

    # ── Step 6: unit summary ────────────────────────────────────────
    summary = client.get(f"{BASE}/summary").json()
    print(
        f"6. unit summary             -> {summary['overall_percentage']}% "
        f"({summary['band']})  breakdown={summary['breakdown']}"
    )

    completions = client.get(f"{BASE}/completions").json()
    print(f"   completed sections       -> {completions['completed_sections']}")


if __name__ == "__main__":
    main()
