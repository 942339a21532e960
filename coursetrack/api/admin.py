from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from coursetrack.api.dependencies import get_tracking_service
from coursetrack.api.schemas import SectionDetailOut
from coursetrack.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["admin"])


@router.get(
    "/users/{user_id}/units/{unit_id}/details",
    response_model=list[SectionDetailOut],
)
async def admin_section_details(
    user_id: str,
    unit_id: str,
    service: Annotated[TrackingService, Depends(get_tracking_service)],
) -> list[SectionDetailOut]:
    logger.info("Admin section details requested user=%s unit=%s", user_id, unit_id)
    details = await service.section_details(user_id, unit_id)
    return [SectionDetailOut.from_domain(d) for d in details]
