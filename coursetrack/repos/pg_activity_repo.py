"""PostgreSQL implementation of ActivityRepo."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text, func, insert, literal, select
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from coursetrack.db.engine import translate_store_errors
from coursetrack.db.tables import ActivityRow
from coursetrack.models.activity import ActivityRecord
from coursetrack.services.dedup import window_start


class PgActivityRepo:
    """Satisfies the ActivityRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append_unless_recent(
        self, record: ActivityRecord, window_seconds: int
    ) -> bool:
        """Insert `record` unless an identical record exists inside the window.

        A transaction-scoped advisory lock on the dedup tuple serializes
        concurrent submissions of the same event; the conditional insert
        is a single statement.  Returns True when a row was written.
        """
        lock_key = "|".join(
            (record.user_id, record.unit_id, record.section_id, record.activity_type)
        )
        recent = (
            select(ActivityRow.id)
            .where(
                ActivityRow.user_id == record.user_id,
                ActivityRow.unit_id == record.unit_id,
                ActivityRow.section_id == record.section_id,
                ActivityRow.activity_type == record.activity_type,
                ActivityRow.created_at
                > window_start(record.created_at, window_seconds),
            )
            .exists()
        )
        candidate = select(
            literal(record.id, UUID(as_uuid=True)),
            literal(record.user_id, String),
            literal(record.unit_id, String),
            literal(record.section_id, String),
            literal(record.activity_type, String),
            literal(record.payload_json, Text),
            literal(record.created_at, Integer),
        )
        if window_seconds > 0:
            candidate = candidate.where(~recent)

        stmt = insert(ActivityRow).from_select(
            [
                "id",
                "user_id",
                "unit_id",
                "section_id",
                "activity_type",
                "activity_data",
                "created_at",
            ],
            candidate,
        )
        with translate_store_errors("append activity"):
            await self._session.execute(
                select(func.pg_advisory_xact_lock(func.hashtextextended(lock_key, 0)))
            )
            result = await self._session.execute(stmt)
            await self._session.commit()
        return result.rowcount == 1

    async def query(
        self, user_id: str, unit_id: str, section_id: str | None = None
    ) -> list[ActivityRecord]:
        stmt = select(ActivityRow).where(
            ActivityRow.user_id == user_id, ActivityRow.unit_id == unit_id
        )
        if section_id is not None:
            stmt = stmt.where(ActivityRow.section_id == section_id)
        stmt = stmt.order_by(ActivityRow.created_at, ActivityRow.id)
        with translate_store_errors("query activities"):
            rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_activity(row) for row in rows]

    async def list_units(self, user_id: str) -> list[str]:
        stmt = (
            select(ActivityRow.unit_id)
            .where(ActivityRow.user_id == user_id)
            .distinct()
            .order_by(ActivityRow.unit_id)
        )
        with translate_store_errors("list units"):
            return list((await self._session.execute(stmt)).scalars().all())

    async def list_sections(self, unit_id: str) -> list[str]:
        stmt = (
            select(ActivityRow.section_id)
            .where(ActivityRow.unit_id == unit_id)
            .distinct()
            .order_by(ActivityRow.section_id)
        )
        with translate_store_errors("list sections"):
            return list((await self._session.execute(stmt)).scalars().all())


def _row_to_activity(row: ActivityRow) -> ActivityRecord:
    return ActivityRecord(
        id=row.id,
        user_id=row.user_id,
        unit_id=row.unit_id,
        section_id=row.section_id,
        activity_type=row.activity_type,
        created_at=row.created_at,
        payload_json=row.activity_data,
    )
