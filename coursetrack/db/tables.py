"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in coursetrack/models/.
Repos convert between SQLAlchemy rows and domain dataclasses.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from coursetrack.db.engine import Base

# --- Activity log (append-only, source of truth) ---


class ActivityRow(Base):
    __tablename__ = "course_activity"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False)
    section_id: Mapped[str] = mapped_column(String(255), nullable=False)
    activity_type: Mapped[str] = mapped_column(
        String(50), nullable=False
    )  # video_watch|button_click|scroll|comment|manual_check|...
    activity_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_course_activity_user_unit_section", "user_id", "unit_id", "section_id"),
        Index("ix_course_activity_activity_type", "activity_type"),
    )


# --- Completion markers ---


class CompletionRow(Base):
    __tablename__ = "course_progress"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False)
    section_id: Mapped[str] = mapped_column(String(255), nullable=False)
    completed_at: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "unit_id", "section_id", name="uq_course_progress_user_unit_section"
        ),
    )


# --- Resume position ---


class LastPositionRow(Base):
    __tablename__ = "course_last_position"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False)
    section_id: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "unit_id", name="uq_course_last_position_user_unit"),
    )
