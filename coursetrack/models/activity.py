from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, get_args
from uuid import UUID, uuid4

ActivityType = Literal[
    "video_watch", "button_click", "scroll", "comment", "manual_check"
]

# Anything outside this set is still stored; it only scores under the
# `other` section rule.
KNOWN_ACTIVITY_TYPES: frozenset[str] = frozenset(get_args(ActivityType))


@dataclass(frozen=True, slots=True)
class ActivityRecord:
    """Append-only event log entry: one learner interaction with a section."""

    id: UUID
    user_id: str
    unit_id: str
    section_id: str
    activity_type: str  # video_watch|button_click|scroll|comment|manual_check|...
    created_at: int
    payload_json: str | None = None

    @staticmethod
    def new(
        *,
        user_id: str,
        unit_id: str,
        section_id: str,
        activity_type: str,
        created_at: int,
        payload: dict[str, Any] | None = None,
    ) -> ActivityRecord:
        return ActivityRecord(
            id=uuid4(),
            user_id=user_id,
            unit_id=unit_id,
            section_id=section_id,
            activity_type=activity_type,
            created_at=created_at,
            payload_json=json.dumps(payload, default=str) if payload else None,
        )

    def payload(self) -> dict[str, Any]:
        """Decoded payload; an absent or unparseable payload reads as empty."""
        if not self.payload_json:
            return {}
        try:
            decoded = json.loads(self.payload_json)
        except ValueError:
            return {}
        return decoded if isinstance(decoded, dict) else {}


@dataclass(frozen=True, slots=True)
class LastPosition:
    """Where a learner last was inside a unit (resume support)."""

    user_id: str
    unit_id: str
    section_id: str
    updated_at: int
