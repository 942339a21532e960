from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from coursetrack.services.classifier import classify_section, is_tracked_section

router = APIRouter(prefix="/v1/sections", tags=["sections"])


class SectionCategoryOut(BaseModel):
    section_id: str
    category: str
    tracked: bool


@router.get("/{section_id}/category", response_model=SectionCategoryOut)
async def get_section_category(section_id: str) -> SectionCategoryOut:
    return SectionCategoryOut(
        section_id=section_id,
        category=str(classify_section(section_id)),
        tracked=is_tracked_section(section_id),
    )
