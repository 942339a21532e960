"""Completion promotion.

A section moves not_started -> in_progress -> completed.  `completed`
is recorded as a durable marker the first time the section's computed
progress reaches 100, and is never taken back by the core: a later
recomputation never reopens the section.  Reopening is an
administrative action outside this service.
"""

from __future__ import annotations

import logging

from coursetrack.core.metrics import SECTION_COMPLETIONS
from coursetrack.repos.completion_repo import CompletionRepo

logger = logging.getLogger(__name__)

COMPLETION_THRESHOLD = 100.0


async def promote_if_complete(
    repo: CompletionRepo,
    *,
    user_id: str,
    unit_id: str,
    section_id: str,
    percentage: float,
    now: int,
) -> bool:
    """Write a completion marker when `percentage` reached 100.

    Returns True only when a new marker was created.  An existing marker
    makes this a no-op.
    """
    if percentage < COMPLETION_THRESHOLD:
        return False

    created = await repo.record(user_id, unit_id, section_id, now)
    if created:
        SECTION_COMPLETIONS.labels(source="promoted").inc()
        logger.info(
            "Section completed user=%s unit=%s section=%s",
            user_id,
            unit_id,
            section_id,
            extra={"user_id": user_id, "unit_id": unit_id, "section_id": section_id},
        )
    return created
