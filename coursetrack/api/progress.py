"""Unit summaries, completion markers and the course overview.

GET /v1/users/{user_id}/units/{unit_id}/summary goes through the
read-through cache (see coursetrack/services/cache.py); the rest read
the stores directly.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from coursetrack.api.dependencies import get_tracking_service
from coursetrack.api.schemas import UnitSummaryOut
from coursetrack.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/users/{user_id}", tags=["progress"])


class CompletionIn(BaseModel):
    section_id: str


class CompletionOut(BaseModel):
    section_id: str
    created: bool


class CompletionsOut(BaseModel):
    unit_id: str
    completed_sections: list[str]


@router.get("/units/{unit_id}/summary", response_model=UnitSummaryOut)
async def get_unit_summary(
    user_id: str,
    unit_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> UnitSummaryOut:
    return UnitSummaryOut.from_domain(await service.unit_summary(user_id, unit_id))


@router.get("/units/{unit_id}/completions", response_model=CompletionsOut)
async def get_completions(
    user_id: str,
    unit_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> CompletionsOut:
    completed = await service.completed_sections(user_id, unit_id)
    return CompletionsOut(unit_id=unit_id, completed_sections=sorted(completed))


@router.post(
    "/units/{unit_id}/completions",
    response_model=CompletionOut,
    status_code=status.HTTP_201_CREATED,
)
async def mark_complete(
    user_id: str,
    unit_id: str,
    body: CompletionIn,
    response: Response,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> CompletionOut:
    created = await service.mark_section_complete(
        user_id=user_id, unit_id=unit_id, section_id=body.section_id
    )
    if not created:
        # Already marked: same outcome, nothing new was written.
        response.status_code = status.HTTP_200_OK
    return CompletionOut(section_id=body.section_id, created=created)


@router.get("/progress", response_model=list[UnitSummaryOut])
async def get_course_overview(
    user_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> list[UnitSummaryOut]:
    summaries = await service.course_overview(user_id)
    logger.debug("Course overview user=%s units=%d", user_id, len(summaries))
    return [UnitSummaryOut.from_domain(s) for s in summaries]
