"""Activity ingestion and per-section activity listing.

  Client -> POST /v1/users/{user_id}/units/{unit_id}/activities
  -> append activity (suppressed if an identical one is recent)
  -> recompute section progress, promote to completed at 100
  -> invalidate cached unit summary
  -> 202 Accepted {accepted, duplicate, percentage, completed}

A duplicate is still a 202: the caller's intent was recorded once
already.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from coursetrack.api.dependencies import get_tracking_service
from coursetrack.api.schemas import SectionDetailOut
from coursetrack.services.tracking_service import TrackingService

router = APIRouter(prefix="/v1/users/{user_id}/units/{unit_id}", tags=["activities"])


class ActivityIn(BaseModel):
    section_id: str
    activity_type: str  # video_watch|button_click|scroll|comment|manual_check|...
    payload: dict[str, Any] | None = None


class AppendOut(BaseModel):
    accepted: bool
    duplicate: bool
    activity_id: str | None = None
    section_id: str
    percentage: float | None = None
    completed: bool = False


@router.post(
    "/activities",
    response_model=AppendOut,
    status_code=status.HTTP_202_ACCEPTED,
)
async def record_activity(
    user_id: str,
    unit_id: str,
    activity: ActivityIn,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> AppendOut:
    result = await service.append_activity(
        user_id=user_id,
        unit_id=unit_id,
        section_id=activity.section_id,
        activity_type=activity.activity_type,
        payload=activity.payload,
    )
    return AppendOut(
        accepted=result.accepted,
        duplicate=result.duplicate,
        activity_id=str(result.record.id) if result.record else None,
        section_id=activity.section_id,
        percentage=result.percentage,
        completed=result.completed,
    )


@router.get("/activities", response_model=list[SectionDetailOut])
async def list_section_activity(
    user_id: str,
    unit_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
    section_id: str | None = None,
) -> list[SectionDetailOut]:
    details = await service.section_activity(user_id, unit_id, section_id)
    return [SectionDetailOut.from_domain(d) for d in details]
