from __future__ import annotations

from typing import Protocol

from coursetrack.models.activity import LastPosition


class PositionRepo(Protocol):
    async def save(self, position: LastPosition) -> None: ...
    async def get(self, user_id: str, unit_id: str) -> LastPosition | None: ...
    async def latest(self, user_id: str) -> LastPosition | None: ...


class InMemoryPositionRepo:
    def __init__(self) -> None:
        self._by_unit: dict[tuple[str, str], LastPosition] = {}

    async def save(self, position: LastPosition) -> None:
        # One row per (user, unit): the newest save replaces the old one.
        self._by_unit[(position.user_id, position.unit_id)] = position

    async def get(self, user_id: str, unit_id: str) -> LastPosition | None:
        return self._by_unit.get((user_id, unit_id))

    async def latest(self, user_id: str) -> LastPosition | None:
        mine = [p for (uid, _), p in self._by_unit.items() if uid == user_id]
        if not mine:
            return None
        return max(mine, key=lambda p: p.updated_at)
