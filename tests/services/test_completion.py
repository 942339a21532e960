from __future__ import annotations

import asyncio

from prometheus_client import REGISTRY

from coursetrack.repos.completion_repo import InMemoryCompletionRepo
from coursetrack.services.completion import promote_if_complete


def _promoted() -> float:
    value = REGISTRY.get_sample_value(
        "section_completions_total", {"source": "promoted"}
    )
    return value if value is not None else 0.0


def _promote(repo: InMemoryCompletionRepo, percentage: float) -> bool:
    return asyncio.run(
        promote_if_complete(
            repo,
            user_id="42",
            unit_id="1337",
            section_id="overview",
            percentage=percentage,
            now=1_700_000_000,
        )
    )


def test_below_threshold_writes_nothing() -> None:
    repo = InMemoryCompletionRepo()
    assert _promote(repo, 99.9) is False
    assert asyncio.run(repo.query("42", "1337")) == set()


def test_reaching_100_writes_marker() -> None:
    repo = InMemoryCompletionRepo()
    before = _promoted()
    assert _promote(repo, 100.0) is True
    assert asyncio.run(repo.query("42", "1337")) == {"overview"}
    assert _promoted() - before == 1


def test_second_promotion_is_a_noop() -> None:
    repo = InMemoryCompletionRepo()
    _promote(repo, 100.0)
    before = _promoted()
    assert _promote(repo, 100.0) is False
    assert len(repo._markers) == 1
    assert _promoted() == before
