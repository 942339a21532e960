from __future__ import annotations

import asyncio

from coursetrack.models.activity import LastPosition
from coursetrack.repos.activity_repo import InMemoryActivityRepo
from coursetrack.repos.completion_repo import InMemoryCompletionRepo
from coursetrack.repos.position_repo import InMemoryPositionRepo
from tests.conftest import make_activity

T0 = 1_700_000_000


# ---- activities ----


def test_append_unless_recent_suppresses_duplicates() -> None:
    repo = InMemoryActivityRepo()
    assert asyncio.run(repo.append_unless_recent(make_activity("overview", created_at=T0), 300))
    assert not asyncio.run(
        repo.append_unless_recent(make_activity("overview", created_at=T0 + 5), 300)
    )
    assert asyncio.run(
        repo.append_unless_recent(make_activity("overview", created_at=T0 + 301), 300)
    )
    assert len(asyncio.run(repo.query("42", "1337"))) == 2


def test_concurrent_identical_appends_store_one_record() -> None:
    repo = InMemoryActivityRepo()

    async def burst() -> list[bool]:
        return list(
            await asyncio.gather(
                *(
                    repo.append_unless_recent(make_activity("overview", created_at=T0), 300)
                    for _ in range(10)
                )
            )
        )

    results = asyncio.run(burst())
    assert results.count(True) == 1
    assert len(repo._records) == 1


def test_query_is_oldest_first_and_scoped() -> None:
    repo = InMemoryActivityRepo()
    for record in (
        make_activity("tools", created_at=T0 + 20),
        make_activity("overview", created_at=T0),
        make_activity("overview", user_id="7", created_at=T0 + 1),
        make_activity("overview", unit_id="9", created_at=T0 + 2),
    ):
        asyncio.run(repo.append_unless_recent(record, 300))

    mine = asyncio.run(repo.query("42", "1337"))
    assert [r.section_id for r in mine] == ["overview", "tools"]
    assert [r.section_id for r in asyncio.run(repo.query("42", "1337", "tools"))] == ["tools"]


def test_list_units_and_sections() -> None:
    repo = InMemoryActivityRepo()
    for record in (
        make_activity("overview", unit_id="2"),
        make_activity("tools", unit_id="1"),
        make_activity("discussion", unit_id="1", user_id="7"),
    ):
        asyncio.run(repo.append_unless_recent(record, 300))

    assert asyncio.run(repo.list_units("42")) == ["1", "2"]
    assert asyncio.run(repo.list_sections("1")) == ["discussion", "tools"]


# ---- completions ----


def test_completion_record_is_insert_if_absent() -> None:
    repo = InMemoryCompletionRepo()
    assert asyncio.run(repo.record("42", "1337", "task", T0)) is True
    assert asyncio.run(repo.record("42", "1337", "task", T0 + 10)) is False
    assert repo._markers[("42", "1337", "task")].completed_at == T0
    assert asyncio.run(repo.query("42", "1337")) == {"task"}
    assert asyncio.run(repo.query("42", "other")) == set()


# ---- positions ----


def test_position_save_replaces_per_unit() -> None:
    repo = InMemoryPositionRepo()
    asyncio.run(repo.save(LastPosition("42", "1", "overview", T0)))
    asyncio.run(repo.save(LastPosition("42", "1", "tools", T0 + 5)))
    asyncio.run(repo.save(LastPosition("42", "2", "task", T0 + 1)))

    got = asyncio.run(repo.get("42", "1"))
    assert got is not None and got.section_id == "tools"
    latest = asyncio.run(repo.latest("42"))
    assert latest is not None and latest.unit_id == "1"
    assert asyncio.run(repo.get("7", "1")) is None
