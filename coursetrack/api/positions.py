"""Resume support: where a learner last was, per unit and overall."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from coursetrack.api.dependencies import get_tracking_service
from coursetrack.api.schemas import PositionOut
from coursetrack.services.tracking_service import TrackingService

router = APIRouter(prefix="/v1/users/{user_id}", tags=["positions"])


class PositionIn(BaseModel):
    section_id: str


@router.put("/units/{unit_id}/position", response_model=PositionOut)
async def save_position(
    user_id: str,
    unit_id: str,
    body: PositionIn,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> PositionOut:
    position = await service.save_last_position(
        user_id=user_id, unit_id=unit_id, section_id=body.section_id
    )
    return PositionOut.from_domain(position)


@router.get("/units/{unit_id}/position", response_model=PositionOut)
async def get_position(
    user_id: str,
    unit_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> PositionOut:
    position = await service.last_position(user_id, unit_id)
    if position is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="no position recorded"
        )
    return PositionOut.from_domain(position)


@router.get("/position", response_model=PositionOut)
async def get_latest_position(
    user_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> PositionOut:
    position = await service.latest_position(user_id)
    if position is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="no position recorded"
        )
    return PositionOut.from_domain(position)
