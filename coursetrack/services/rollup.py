"""Unit roll-up: per-section progress -> one unit percentage.

A unit is weighted as four equal slots of 25 points each:

  overview    best overview/intro section
  tools       best tools section (tools_demo and tools_generic together)
  discussion  best discussion section
  task        best task/assignment section (synonyms share one slot)

Each slot takes the MAXIMUM percentage among its sections, never a sum
or an average: a unit can carry several tools sub-sections and only the
best one counts.  Sections of category `other` are reported but carry
no weight.

The final sum is rounded exactly once, half up (62.5 -> 63).  Slot and
section values stay unrounded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal

from coursetrack.models.activity import ActivityRecord
from coursetrack.models.progress import (
    RollupBucket,
    SectionCategory,
    SectionProgress,
    UnitSummary,
)
from coursetrack.services.section_progress import build_section_progress

logger = logging.getLogger(__name__)

BUCKET_WEIGHTS: dict[RollupBucket, float] = {
    RollupBucket.OVERVIEW: 25.0,
    RollupBucket.TOOLS: 25.0,
    RollupBucket.DISCUSSION: 25.0,
    RollupBucket.TASK: 25.0,
}

CATEGORY_BUCKETS: dict[SectionCategory, RollupBucket] = {
    SectionCategory.OVERVIEW: RollupBucket.OVERVIEW,
    SectionCategory.TOOLS_DEMO: RollupBucket.TOOLS,
    SectionCategory.TOOLS_GENERIC: RollupBucket.TOOLS,
    SectionCategory.DISCUSSION: RollupBucket.DISCUSSION,
    SectionCategory.TASK: RollupBucket.TASK,
}


def round_percentage(value: float) -> int:
    """Round half up and clamp to [0, 100]."""
    rounded = int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, rounded))


def bucket_maxima(sections: Iterable[SectionProgress]) -> dict[RollupBucket, float]:
    best = dict.fromkeys(BUCKET_WEIGHTS, 0.0)
    for section in sections:
        bucket = CATEGORY_BUCKETS.get(section.category)
        if bucket is None:
            continue
        if section.percentage > best[bucket]:
            best[bucket] = section.percentage
    return best


def summarize_sections(
    unit_id: str, sections: Iterable[SectionProgress]
) -> UnitSummary:
    """Roll already-computed section progress up into a UnitSummary."""
    section_list = tuple(sorted(sections, key=lambda s: s.section_id))
    breakdown = bucket_maxima(section_list)
    total = sum(
        breakdown[bucket] / 100 * weight for bucket, weight in BUCKET_WEIGHTS.items()
    )
    summary = UnitSummary(
        unit_id=unit_id,
        overall_percentage=round_percentage(total),
        breakdown=breakdown,
        sections=section_list,
    )
    logger.debug(
        "Unit roll-up unit=%s total=%.2f overall=%d breakdown=%s",
        unit_id,
        total,
        summary.overall_percentage,
        {str(k): v for k, v in breakdown.items()},
    )
    return summary


def compute_unit_summary(
    unit_id: str,
    section_activities: Mapping[str, Iterable[ActivityRecord]],
) -> UnitSummary:
    """Compute a unit summary from each section's full activity history."""
    return summarize_sections(
        unit_id,
        (
            build_section_progress(section_id, activities)
            for section_id, activities in section_activities.items()
        ),
    )
