from __future__ import annotations

import pytest

from coursetrack.models.progress import SectionCategory
from coursetrack.services.section_progress import (
    build_section_progress,
    compute_section_progress,
)
from tests.conftest import make_activities, make_activity


def _pct(section_id: str, activity_type: str, count: int) -> float:
    return compute_section_progress(
        section_id, make_activities(section_id, activity_type, count)
    )


def test_empty_history_is_zero_for_every_category() -> None:
    for section_id in ("overview", "tools_demo", "tools", "discussion", "task", "x"):
        assert compute_section_progress(section_id, []) == 0.0


def test_overview_one_watch_completes() -> None:
    assert _pct("overview", "video_watch", 1) == 100.0


def test_overview_ignores_other_activity_types() -> None:
    activities = make_activities("overview", "button_click", 3)
    assert compute_section_progress("overview", activities) == 0.0


@pytest.mark.parametrize(
    ("watches", "expected"),
    [(1, 25.0), (2, 50.0), (3, 75.0), (4, 100.0), (5, 100.0)],
)
def test_tools_demo_needs_four_watches(watches: int, expected: float) -> None:
    activities = make_activities("tools_demo", "video_watch", watches)
    assert compute_section_progress("tools_demo", activities) == expected


@pytest.mark.parametrize(("watches", "expected"), [(1, 25.0), (3, 75.0), (9, 100.0)])
def test_tools_generic_scores_25_per_watch(watches: int, expected: float) -> None:
    activities = make_activities("help_tools", "video_watch", watches)
    assert compute_section_progress("help_tools", activities) == expected


def test_discussion_is_binary() -> None:
    assert _pct("discussion", "scroll", 4) == 0.0
    assert _pct("discussion", "comment", 1) == 100.0
    assert _pct("discussion", "comment", 3) == 100.0


def test_task_is_binary_on_manual_check() -> None:
    assert _pct("task_final", "video_watch", 2) == 0.0
    assert _pct("task_final", "manual_check", 1) == 100.0


def test_other_counts_any_activity_including_unknown_types() -> None:
    activities = [
        make_activity("inspiration", "scroll", created_at=1),
        make_activity("inspiration", "hover", created_at=2),
    ]
    assert compute_section_progress("inspiration", activities) == 40.0
    assert _pct("inspiration", "hover", 7) == 100.0


def test_unknown_types_do_not_score_in_typed_sections() -> None:
    activities = make_activities("overview", "hover", 5)
    assert compute_section_progress("overview", activities) == 0.0


def test_bad_payload_still_counts() -> None:
    record = make_activity("overview", "video_watch")
    broken = type(record)(
        id=record.id,
        user_id=record.user_id,
        unit_id=record.unit_id,
        section_id=record.section_id,
        activity_type=record.activity_type,
        created_at=record.created_at,
        payload_json="{not json",
    )
    assert compute_section_progress("overview", [broken]) == 100.0


def test_computation_is_pure() -> None:
    activities = make_activities("tools_demo", "video_watch", 3)
    first = compute_section_progress("tools_demo", activities)
    second = compute_section_progress("tools_demo", activities)
    assert first == second == 75.0


def test_result_stays_in_range() -> None:
    for count in range(0, 12):
        value = _pct("tools", "video_watch", count)
        assert 0.0 <= value <= 100.0


def test_build_section_progress_carries_category_and_count() -> None:
    progress = build_section_progress(
        "tools_demo_1", make_activities("tools_demo_1", "video_watch", 2)
    )
    assert progress.category == SectionCategory.TOOLS_DEMO
    assert progress.percentage == 50.0
    assert progress.activity_count == 2
    assert progress.status == "in_progress"


def test_build_section_progress_accepts_generators() -> None:
    activities = (a for a in make_activities("overview", "video_watch", 1))
    progress = build_section_progress("overview", activities)
    assert progress.percentage == 100.0
    assert progress.status == "completed"
