"""FastAPI dependencies for the tracking endpoints.

With DATABASE_URL set, every request gets PostgreSQL-backed stores
bound to its own session.  Without it, all requests share the
module-level in-memory stores below (dev and tests).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from coursetrack.db.engine import async_session_factory, session_scope
from coursetrack.repos.activity_repo import InMemoryActivityRepo
from coursetrack.repos.completion_repo import InMemoryCompletionRepo
from coursetrack.repos.pg_activity_repo import PgActivityRepo
from coursetrack.repos.pg_completion_repo import PgCompletionRepo
from coursetrack.repos.pg_position_repo import PgPositionRepo
from coursetrack.repos.position_repo import InMemoryPositionRepo
from coursetrack.services.cache import cache_service
from coursetrack.services.tracking_service import TrackingService

activity_repo = InMemoryActivityRepo()
completion_repo = InMemoryCompletionRepo()
position_repo = InMemoryPositionRepo()


async def get_tracking_service() -> AsyncGenerator[TrackingService, None]:
    if async_session_factory is None:
        yield TrackingService(activity_repo, completion_repo, position_repo, cache_service)
        return

    async with session_scope() as session:
        yield TrackingService(
            PgActivityRepo(session),
            PgCompletionRepo(session),
            PgPositionRepo(session),
            cache_service,
        )
