"""create course tracking tables

Revision ID: 3b9e61c2d7a4
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b9e61c2d7a4"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "course_activity",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("unit_id", sa.String(length=64), nullable=False),
        sa.Column("section_id", sa.String(length=255), nullable=False),
        sa.Column("activity_type", sa.String(length=50), nullable=False),
        sa.Column("activity_data", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Integer(), nullable=False),
    )
    op.create_index(
        "ix_course_activity_user_unit_section",
        "course_activity",
        ["user_id", "unit_id", "section_id"],
    )
    op.create_index(
        "ix_course_activity_activity_type", "course_activity", ["activity_type"]
    )

    op.create_table(
        "course_progress",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("unit_id", sa.String(length=64), nullable=False),
        sa.Column("section_id", sa.String(length=255), nullable=False),
        sa.Column("completed_at", sa.Integer(), nullable=False),
        sa.UniqueConstraint(
            "user_id",
            "unit_id",
            "section_id",
            name="uq_course_progress_user_unit_section",
        ),
    )

    op.create_table(
        "course_last_position",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("unit_id", sa.String(length=64), nullable=False),
        sa.Column("section_id", sa.String(length=255), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "unit_id", name="uq_course_last_position_user_unit"
        ),
    )


def downgrade() -> None:
    op.drop_table("course_last_position")
    op.drop_table("course_progress")
    op.drop_index("ix_course_activity_activity_type", table_name="course_activity")
    op.drop_index("ix_course_activity_user_unit_section", table_name="course_activity")
    op.drop_table("course_activity")
