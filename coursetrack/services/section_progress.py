"""Per-section progress calculation.

Pure functions over a section id and its activity history.  Nothing here
touches a store or a cache, so computing the same inputs twice always
gives the same answer.

Scoring by category:

  overview       1 video watch completes it          min(100, watches * 100)
  tools_demo     4 video watches complete it         min(100, watches * 25)
  tools_generic  25 points per video watch           min(100, watches * 25)
  discussion     any comment completes it            0 | 100
  task           any manual check completes it       0 | 100
  other          20 points per activity of any type  min(100, n * 20)

Values are returned unrounded.  Rounding is a display concern and must
never happen before a value is compared with 100 or summed into a unit.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence

from coursetrack.models.activity import ActivityRecord
from coursetrack.models.progress import SectionCategory, SectionProgress
from coursetrack.services.classifier import classify_section

_TOOLS_DEMO_REQUIRED_WATCHES = 4
_TOOLS_POINTS_PER_WATCH = 25.0
_OTHER_POINTS_PER_ACTIVITY = 20.0


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _binary(done: bool) -> float:
    return 100.0 if done else 0.0


_Scorer = Callable[[Counter[str], int], float]

_SCORERS: dict[SectionCategory, _Scorer] = {
    SectionCategory.OVERVIEW: lambda by_type, _total: _clamp(
        by_type["video_watch"] / 1 * 100
    ),
    SectionCategory.TOOLS_DEMO: lambda by_type, _total: _clamp(
        by_type["video_watch"] / _TOOLS_DEMO_REQUIRED_WATCHES * 100
    ),
    SectionCategory.TOOLS_GENERIC: lambda by_type, _total: _clamp(
        by_type["video_watch"] * _TOOLS_POINTS_PER_WATCH
    ),
    SectionCategory.DISCUSSION: lambda by_type, _total: _binary(by_type["comment"] >= 1),
    SectionCategory.TASK: lambda by_type, _total: _binary(by_type["manual_check"] >= 1),
    SectionCategory.OTHER: lambda _by_type, total: _clamp(
        total * _OTHER_POINTS_PER_ACTIVITY
    ),
}


def _score(category: SectionCategory, activities: Sequence[ActivityRecord]) -> float:
    if not activities:
        return 0.0
    by_type = Counter(a.activity_type for a in activities)
    return _SCORERS[category](by_type, len(activities))


def compute_section_progress(
    section_id: str, activities: Iterable[ActivityRecord]
) -> float:
    """Return the section's progress in [0, 100]."""
    return _score(classify_section(section_id), list(activities))


def build_section_progress(
    section_id: str, activities: Iterable[ActivityRecord]
) -> SectionProgress:
    records = list(activities)
    category = classify_section(section_id)
    return SectionProgress(
        section_id=section_id,
        category=category,
        percentage=_score(category, records),
        activity_count=len(records),
    )
