from __future__ import annotations

from typing import Protocol

from coursetrack.models.activity import ActivityRecord
from coursetrack.services.dedup import dedup_key, is_duplicate


class ActivityRepo(Protocol):
    async def append_unless_recent(
        self, record: ActivityRecord, window_seconds: int
    ) -> bool: ...
    async def query(
        self, user_id: str, unit_id: str, section_id: str | None = None
    ) -> list[ActivityRecord]: ...
    async def list_units(self, user_id: str) -> list[str]: ...
    async def list_sections(self, unit_id: str) -> list[str]: ...


class InMemoryActivityRepo:
    def __init__(self) -> None:
        self._records: list[ActivityRecord] = []

    async def append_unless_recent(
        self, record: ActivityRecord, window_seconds: int
    ) -> bool:
        """Append `record` unless an identical recent record exists.

        No await between the check and the append, so concurrent requests
        on the same event loop cannot both pass the check.
        """
        key = dedup_key(record)
        history = [r for r in self._records if dedup_key(r) == key]
        if is_duplicate(record, history, window_seconds):
            return False
        self._records.append(record)
        return True

    async def query(
        self, user_id: str, unit_id: str, section_id: str | None = None
    ) -> list[ActivityRecord]:
        matches = [
            r
            for r in self._records
            if r.user_id == user_id
            and r.unit_id == unit_id
            and (section_id is None or r.section_id == section_id)
        ]
        return sorted(matches, key=lambda r: r.created_at)

    async def list_units(self, user_id: str) -> list[str]:
        return sorted({r.unit_id for r in self._records if r.user_id == user_id})

    async def list_sections(self, unit_id: str) -> list[str]:
        return sorted({r.section_id for r in self._records if r.unit_id == unit_id})
