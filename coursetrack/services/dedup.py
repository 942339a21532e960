"""Duplicate activity suppression.

The tracking script in the browser can fire the same event several
times (a video that re-enters the viewport, a double-clicked button).
A submission is a duplicate when the same (user, unit, section,
activity_type) already has a record created within the window before
`now`.  The window slides: every accepted event starts a new one.

Stores apply this same rule atomically in
`ActivityRepo.append_unless_recent`; `is_duplicate` is the shared
definition.
"""

from __future__ import annotations

from collections.abc import Iterable

from coursetrack.models.activity import ActivityRecord

DEFAULT_WINDOW_SECONDS = 300


def dedup_key(record: ActivityRecord) -> tuple[str, str, str, str]:
    return (record.user_id, record.unit_id, record.section_id, record.activity_type)


def window_start(now: int, window_seconds: int) -> int:
    """Records created strictly after this instant fall inside the window."""
    return now - window_seconds


def is_duplicate(
    candidate: ActivityRecord,
    history: Iterable[ActivityRecord],
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> bool:
    if window_seconds <= 0:
        return False
    key = dedup_key(candidate)
    since = window_start(candidate.created_at, window_seconds)
    return any(
        dedup_key(existing) == key and existing.created_at > since
        for existing in history
    )
