"""Activity ingestion and progress read models.

Ingestion sequence:
  caller -> append_activity(user, unit, section, type, payload)
  -> validate identifiers
  -> append to the activity log unless an identical event is recent
  -> recompute the section's progress from its full history
  -> write a completion marker if the section reached 100
  -> invalidate the cached unit summary
  -> AppendResult(accepted | duplicate)

Reads (unit summary, course overview, drill-down) are recomputed from
the activity log.  Only the unit summary goes through the read-through
cache.
"""

from __future__ import annotations

import datetime
import json
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from coursetrack.core.config import SETTINGS
from coursetrack.core.errors import InvalidInputError
from coursetrack.core.metrics import (
    ACTIVITIES_RECORDED,
    CACHE_OPERATIONS,
    SECTION_COMPLETIONS,
)
from coursetrack.models.activity import KNOWN_ACTIVITY_TYPES, ActivityRecord, LastPosition
from coursetrack.models.progress import (
    RollupBucket,
    SectionCategory,
    SectionDetail,
    SectionProgress,
    UnitSummary,
)
from coursetrack.repos.activity_repo import ActivityRepo
from coursetrack.repos.completion_repo import CompletionRepo
from coursetrack.repos.position_repo import PositionRepo
from coursetrack.services.cache import (
    CacheService,
    invalidate_summary,
    summary_cache_key,
    summary_generation,
)
from coursetrack.services.classifier import is_tracked_section
from coursetrack.services.completion import promote_if_complete
from coursetrack.services.rollup import compute_unit_summary
from coursetrack.services.section_progress import (
    build_section_progress,
    compute_section_progress,
)

logger = logging.getLogger(__name__)

_MAX_LENGTHS = {
    "user_id": 64,
    "unit_id": 64,
    "section_id": 255,
    "activity_type": 50,
}


def _utc_now() -> int:
    return int(datetime.datetime.now(datetime.UTC).timestamp())


def validate_identifier(value: Any, field: str) -> str:
    """Reject blank or oversized identifiers.  The value is not normalized."""
    if not isinstance(value, str) or not value.strip():
        logger.warning("Rejected blank %s", field)
        raise InvalidInputError(f"{field} must be non-empty", field=field)
    limit = _MAX_LENGTHS[field]
    if len(value) > limit:
        logger.warning("Rejected %s longer than %d chars", field, limit)
        raise InvalidInputError(
            f"{field} must be at most {limit} characters", field=field
        )
    return value


def unit_sort_key(unit_id: str) -> tuple[int, int, str]:
    """Numeric unit ids sort numerically and ahead of free-form ones."""
    if unit_id.isdigit():
        return (0, int(unit_id), unit_id)
    return (1, 0, unit_id)


@dataclass(frozen=True, slots=True)
class AppendResult:
    accepted: bool
    duplicate: bool
    record: ActivityRecord | None = None
    percentage: float | None = None
    completed: bool = False  # True only when this append created the marker


def _encode_summary(summary: UnitSummary) -> str:
    return json.dumps(
        {
            "unit_id": summary.unit_id,
            "overall_percentage": summary.overall_percentage,
            "breakdown": {str(k): v for k, v in summary.breakdown.items()},
            "sections": [
                {
                    "section_id": s.section_id,
                    "category": str(s.category),
                    "percentage": s.percentage,
                    "activity_count": s.activity_count,
                }
                for s in summary.sections
            ],
        }
    )


def _decode_summary(raw: str) -> UnitSummary:
    data = json.loads(raw)
    return UnitSummary(
        unit_id=data["unit_id"],
        overall_percentage=data["overall_percentage"],
        breakdown={RollupBucket(k): v for k, v in data["breakdown"].items()},
        sections=tuple(
            SectionProgress(
                section_id=s["section_id"],
                category=SectionCategory(s["category"]),
                percentage=s["percentage"],
                activity_count=s["activity_count"],
            )
            for s in data["sections"]
        ),
    )


class TrackingService:
    """Glue between the stores and the pure progress engine."""

    def __init__(
        self,
        activities: ActivityRepo,
        completions: CompletionRepo,
        positions: PositionRepo,
        cache: CacheService,
        *,
        dedup_window_seconds: int = SETTINGS.dedup_window_seconds,
        cache_ttl_seconds: int = SETTINGS.summary_cache_ttl_seconds,
        clock: Callable[[], int] = _utc_now,
    ) -> None:
        self._activities = activities
        self._completions = completions
        self._positions = positions
        self._cache = cache
        self._dedup_window_seconds = dedup_window_seconds
        self._cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def append_activity(
        self,
        *,
        user_id: str,
        unit_id: str,
        section_id: str,
        activity_type: str,
        payload: dict[str, Any] | None = None,
    ) -> AppendResult:
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")
        validate_identifier(section_id, "section_id")
        validate_identifier(activity_type, "activity_type")

        log_ctx = {
            "user_id": user_id,
            "unit_id": unit_id,
            "section_id": section_id,
            "activity_type": activity_type,
        }
        if activity_type not in KNOWN_ACTIVITY_TYPES:
            logger.debug("Unrecognized activity_type=%s stored", activity_type)

        now = self._clock()
        record = ActivityRecord.new(
            user_id=user_id,
            unit_id=unit_id,
            section_id=section_id,
            activity_type=activity_type,
            created_at=now,
            payload=payload,
        )

        stored = await self._activities.append_unless_recent(
            record, self._dedup_window_seconds
        )
        if not stored:
            ACTIVITIES_RECORDED.labels(result="duplicate").inc()
            logger.info(
                "Duplicate activity suppressed user=%s unit=%s section=%s type=%s",
                user_id,
                unit_id,
                section_id,
                activity_type,
                extra=log_ctx,
            )
            return AppendResult(accepted=False, duplicate=True)

        ACTIVITIES_RECORDED.labels(result="accepted").inc()

        history = await self._activities.query(user_id, unit_id, section_id)
        percentage = compute_section_progress(section_id, history)
        completed = await promote_if_complete(
            self._completions,
            user_id=user_id,
            unit_id=unit_id,
            section_id=section_id,
            percentage=percentage,
            now=now,
        )

        await invalidate_summary(self._cache, user_id, unit_id)

        logger.info(
            "Activity recorded user=%s unit=%s section=%s type=%s progress=%.1f",
            user_id,
            unit_id,
            section_id,
            activity_type,
            percentage,
            extra=log_ctx,
        )
        return AppendResult(
            accepted=True,
            duplicate=False,
            record=record,
            percentage=percentage,
            completed=completed,
        )

    async def mark_section_complete(
        self, *, user_id: str, unit_id: str, section_id: str
    ) -> bool:
        """Write a completion marker directly, bypassing scoring.

        Returns True when a new marker was created, False when the section
        was already marked.
        """
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")
        validate_identifier(section_id, "section_id")

        created = await self._completions.record(
            user_id, unit_id, section_id, self._clock()
        )
        if created:
            SECTION_COMPLETIONS.labels(source="manual").inc()
            await invalidate_summary(self._cache, user_id, unit_id)
            logger.info(
                "Section marked complete user=%s unit=%s section=%s",
                user_id,
                unit_id,
                section_id,
                extra={
                    "user_id": user_id,
                    "unit_id": unit_id,
                    "section_id": section_id,
                },
            )
        return created

    async def save_last_position(
        self, *, user_id: str, unit_id: str, section_id: str
    ) -> LastPosition:
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")
        validate_identifier(section_id, "section_id")

        position = LastPosition(
            user_id=user_id,
            unit_id=unit_id,
            section_id=section_id,
            updated_at=self._clock(),
        )
        await self._positions.save(position)
        return position

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def completed_sections(self, user_id: str, unit_id: str) -> set[str]:
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")
        return await self._completions.query(user_id, unit_id)

    async def _activities_by_section(
        self, user_id: str, unit_id: str, section_id: str | None = None
    ) -> dict[str, list[ActivityRecord]]:
        grouped: dict[str, list[ActivityRecord]] = defaultdict(list)
        for record in await self._activities.query(user_id, unit_id, section_id):
            grouped[record.section_id].append(record)
        return dict(grouped)

    async def unit_summary(self, user_id: str, unit_id: str) -> UnitSummary:
        """Read-through cached unit summary."""
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")

        # Generation first: an append that lands during the store read bumps
        # it, so the snapshot below is cached under a key no one reads.
        generation = await summary_generation(self._cache, user_id, unit_id)
        key = summary_cache_key(user_id, unit_id, generation)
        cached = await self._cache.get(key)
        if cached is not None:
            CACHE_OPERATIONS.labels(operation="hit").inc()
            return _decode_summary(cached)

        CACHE_OPERATIONS.labels(operation="miss").inc()
        summary = compute_unit_summary(
            unit_id, await self._activities_by_section(user_id, unit_id)
        )
        await self._cache.set(key, _encode_summary(summary), self._cache_ttl_seconds)
        return summary

    async def course_overview(self, user_id: str) -> list[UnitSummary]:
        """Summaries of every unit the learner has any activity in."""
        validate_identifier(user_id, "user_id")
        units = sorted(await self._activities.list_units(user_id), key=unit_sort_key)
        return [await self.unit_summary(user_id, unit_id) for unit_id in units]

    async def section_activity(
        self, user_id: str, unit_id: str, section_id: str | None = None
    ) -> list[SectionDetail]:
        """Progress and raw activity (newest first) per touched section."""
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")
        if section_id is not None:
            validate_identifier(section_id, "section_id")

        grouped = await self._activities_by_section(user_id, unit_id, section_id)
        completed = await self._completions.query(user_id, unit_id)
        return [
            _section_detail(sid, grouped[sid], sid in completed)
            for sid in sorted(grouped)
        ]

    async def section_details(self, user_id: str, unit_id: str) -> list[SectionDetail]:
        """Admin drill-down: every content section of the unit for one learner.

        Sections come from all learners' activity in the unit so untouched
        sections show up at 0%.
        """
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")

        sections = [
            s for s in await self._activities.list_sections(unit_id)
            if is_tracked_section(s)
        ]
        grouped = await self._activities_by_section(user_id, unit_id)
        completed = await self._completions.query(user_id, unit_id)
        return [
            _section_detail(sid, grouped.get(sid, []), sid in completed)
            for sid in sorted(sections)
        ]

    async def last_position(self, user_id: str, unit_id: str) -> LastPosition | None:
        validate_identifier(user_id, "user_id")
        validate_identifier(unit_id, "unit_id")
        return await self._positions.get(user_id, unit_id)

    async def latest_position(self, user_id: str) -> LastPosition | None:
        validate_identifier(user_id, "user_id")
        return await self._positions.latest(user_id)


def _section_detail(
    section_id: str, activities: list[ActivityRecord], completed: bool
) -> SectionDetail:
    return SectionDetail(
        progress=build_section_progress(section_id, activities),
        completed=completed,
        activities=tuple(
            sorted(activities, key=lambda r: r.created_at, reverse=True)
        ),
    )
