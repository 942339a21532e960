"""PostgreSQL implementation of CompletionRepo."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from coursetrack.db.engine import translate_store_errors
from coursetrack.db.tables import CompletionRow


class PgCompletionRepo:
    """Satisfies the CompletionRepo Protocol using PostgreSQL."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record(
        self, user_id: str, unit_id: str, section_id: str, completed_at: int
    ) -> bool:
        """Insert-if-absent on the unique (user, unit, section) key.

        Returns True only when this call created the marker; a concurrent
        insert that won the race yields False.
        """
        stmt = (
            pg_insert(CompletionRow)
            .values(
                user_id=user_id,
                unit_id=unit_id,
                section_id=section_id,
                completed_at=completed_at,
            )
            .on_conflict_do_nothing(
                index_elements=["user_id", "unit_id", "section_id"]
            )
        )
        with translate_store_errors("record completion"):
            result = await self._session.execute(stmt)
            await self._session.commit()
        return result.rowcount == 1

    async def query(self, user_id: str, unit_id: str) -> set[str]:
        stmt = select(CompletionRow.section_id).where(
            CompletionRow.user_id == user_id, CompletionRow.unit_id == unit_id
        )
        with translate_store_errors("query completions"):
            rows = (await self._session.execute(stmt)).scalars().all()
        return set(rows)
