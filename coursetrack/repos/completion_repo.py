from __future__ import annotations

from typing import Protocol

from coursetrack.models.progress import CompletionMarker


class CompletionRepo(Protocol):
    async def record(
        self, user_id: str, unit_id: str, section_id: str, completed_at: int
    ) -> bool: ...
    async def query(self, user_id: str, unit_id: str) -> set[str]: ...


class InMemoryCompletionRepo:
    def __init__(self) -> None:
        self._markers: dict[tuple[str, str, str], CompletionMarker] = {}

    async def record(
        self, user_id: str, unit_id: str, section_id: str, completed_at: int
    ) -> bool:
        """Insert-if-absent.  Returns True only when a marker was created."""
        key = (user_id, unit_id, section_id)
        if key in self._markers:
            return False
        self._markers[key] = CompletionMarker(
            user_id=user_id,
            unit_id=unit_id,
            section_id=section_id,
            completed_at=completed_at,
        )
        return True

    async def query(self, user_id: str, unit_id: str) -> set[str]:
        return {
            m.section_id
            for m in self._markers.values()
            if m.user_id == user_id and m.unit_id == unit_id
        }
