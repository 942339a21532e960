from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from coursetrack.models.activity import ActivityRecord

SectionStatus = Literal["not_started", "in_progress", "completed"]
ProgressBand = Literal["low", "medium", "high"]


class SectionCategory(StrEnum):
    """Semantic kind of a section, derived from its identifier.

    Closed set: every section has exactly one category.
    """

    OVERVIEW = "overview"
    TOOLS_DEMO = "tools_demo"
    TOOLS_GENERIC = "tools_generic"
    DISCUSSION = "discussion"
    TASK = "task"
    OTHER = "other"


class RollupBucket(StrEnum):
    """The four weighted slots of a unit.  Both tools variants share one."""

    OVERVIEW = "overview"
    TOOLS = "tools"
    DISCUSSION = "discussion"
    TASK = "task"


@dataclass(frozen=True, slots=True)
class SectionProgress:
    """Derived, never persisted.  Recomputed from the activity log."""

    section_id: str
    category: SectionCategory
    percentage: float
    activity_count: int

    @property
    def status(self) -> SectionStatus:
        if self.percentage >= 100:
            return "completed"
        if self.percentage > 0:
            return "in_progress"
        return "not_started"


@dataclass(frozen=True, slots=True)
class CompletionMarker:
    user_id: str
    unit_id: str
    section_id: str
    completed_at: int


@dataclass(frozen=True, slots=True)
class UnitSummary:
    """Projection / read model for one unit of one learner.

    Like CourseProgress, but never stored: the event log is the source
    of truth and this is rebuilt (or read from cache) on demand.
    """

    unit_id: str
    overall_percentage: int
    breakdown: dict[RollupBucket, float]
    sections: tuple[SectionProgress, ...] = ()

    @property
    def band(self) -> ProgressBand:
        if self.overall_percentage >= 80:
            return "high"
        if self.overall_percentage >= 50:
            return "medium"
        return "low"


@dataclass(frozen=True, slots=True)
class SectionDetail:
    """One section of a unit with its progress, marker and raw activity."""

    progress: SectionProgress
    completed: bool
    activities: tuple[ActivityRecord, ...] = ()

    @property
    def status(self) -> SectionStatus:
        # A marker keeps a section completed whatever it recomputes to.
        if self.completed:
            return "completed"
        return self.progress.status
