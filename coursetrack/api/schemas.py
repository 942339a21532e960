"""Response models shared by the progress, activity and admin routers."""

from __future__ import annotations

from pydantic import BaseModel

from coursetrack.models.activity import ActivityRecord, LastPosition
from coursetrack.models.progress import SectionDetail, SectionProgress, UnitSummary


class SectionProgressOut(BaseModel):
    section_id: str
    category: str
    percentage: float
    activity_count: int
    status: str

    @classmethod
    def from_domain(cls, progress: SectionProgress) -> SectionProgressOut:
        return cls(
            section_id=progress.section_id,
            category=str(progress.category),
            percentage=progress.percentage,
            activity_count=progress.activity_count,
            status=progress.status,
        )


class UnitSummaryOut(BaseModel):
    unit_id: str
    overall_percentage: int
    band: str
    breakdown: dict[str, float]
    sections: list[SectionProgressOut]

    @classmethod
    def from_domain(cls, summary: UnitSummary) -> UnitSummaryOut:
        return cls(
            unit_id=summary.unit_id,
            overall_percentage=summary.overall_percentage,
            band=summary.band,
            breakdown={str(k): v for k, v in summary.breakdown.items()},
            sections=[SectionProgressOut.from_domain(s) for s in summary.sections],
        )


class ActivityOut(BaseModel):
    id: str
    section_id: str
    activity_type: str
    payload: dict
    created_at: int

    @classmethod
    def from_domain(cls, record: ActivityRecord) -> ActivityOut:
        return cls(
            id=str(record.id),
            section_id=record.section_id,
            activity_type=record.activity_type,
            payload=record.payload(),
            created_at=record.created_at,
        )


class SectionDetailOut(BaseModel):
    section_id: str
    category: str
    percentage: float
    status: str
    completed: bool
    activities: list[ActivityOut]

    @classmethod
    def from_domain(cls, detail: SectionDetail) -> SectionDetailOut:
        return cls(
            section_id=detail.progress.section_id,
            category=str(detail.progress.category),
            percentage=detail.progress.percentage,
            status=detail.status,
            completed=detail.completed,
            activities=[ActivityOut.from_domain(a) for a in detail.activities],
        )


class PositionOut(BaseModel):
    unit_id: str
    section_id: str
    updated_at: int

    @classmethod
    def from_domain(cls, position: LastPosition) -> PositionOut:
        return cls(
            unit_id=position.unit_id,
            section_id=position.section_id,
            updated_at=position.updated_at,
        )
