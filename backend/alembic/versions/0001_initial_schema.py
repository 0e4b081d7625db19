"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates the time_profiles table and the queued_jobs table that rollup
rebuild/teardown jobs are written to.

time_profiles ids are assigned by the service inside the local region's
block (region * REGION_FACTOR + local sequence), not by the database.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- time_profiles ---
    op.create_table(
        "time_profiles",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer, "sqlite"), primary_key=True, autoincrement=True),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("days", sa.JSON, nullable=False),
        sa.Column("hours", sa.JSON, nullable=False),
        sa.Column("tz", sa.String(100), nullable=True),
        sa.Column("profile_type", sa.Enum("user", "global", name="profile_type"), nullable=True),
        sa.Column("profile_key", sa.String(255), nullable=True),
        sa.Column("rollup_daily_metrics", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("system_default", sa.Boolean, nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_time_profiles_description", "time_profiles", ["description"])
    op.create_index("ix_time_profiles_tz", "time_profiles", ["tz"])
    op.create_index("ix_time_profiles_profile_key", "time_profiles", ["profile_key"])

    # --- queued_jobs ---
    op.create_table(
        "queued_jobs",
        sa.Column("job_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("class_name", sa.String(100), nullable=False),
        sa.Column("instance_id", sa.BigInteger, nullable=False),
        sa.Column("method_name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_queued_jobs_instance_id", "queued_jobs", ["instance_id"])


def downgrade() -> None:
    op.drop_table("queued_jobs")
    op.drop_table("time_profiles")
    sa.Enum(name="profile_type").drop(op.get_bind(), checkfirst=True)
