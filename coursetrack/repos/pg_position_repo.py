"""PostgreSQL implementation of PositionRepo."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from coursetrack.db.engine import translate_store_errors
from coursetrack.db.tables import LastPositionRow
from coursetrack.models.activity import LastPosition


class PgPositionRepo:
    """Satisfies the PositionRepo Protocol using PostgreSQL."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, position: LastPosition) -> None:
        stmt = pg_insert(LastPositionRow).values(
            user_id=position.user_id,
            unit_id=position.unit_id,
            section_id=position.section_id,
            updated_at=position.updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "unit_id"],
            set_={
                "section_id": stmt.excluded.section_id,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        with translate_store_errors("save position"):
            await self._session.execute(stmt)
            await self._session.commit()

    async def get(self, user_id: str, unit_id: str) -> LastPosition | None:
        stmt = select(LastPositionRow).where(
            LastPositionRow.user_id == user_id, LastPositionRow.unit_id == unit_id
        )
        with translate_store_errors("get position"):
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_position(row)

    async def latest(self, user_id: str) -> LastPosition | None:
        stmt = (
            select(LastPositionRow)
            .where(LastPositionRow.user_id == user_id)
            .order_by(LastPositionRow.updated_at.desc())
            .limit(1)
        )
        with translate_store_errors("latest position"):
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_position(row)


def _row_to_position(row: LastPositionRow) -> LastPosition:
    return LastPosition(
        user_id=row.user_id,
        unit_id=row.unit_id,
        section_id=row.section_id,
        updated_at=row.updated_at,
    )
