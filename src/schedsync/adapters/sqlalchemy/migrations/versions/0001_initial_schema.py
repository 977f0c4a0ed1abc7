"""Initial schedule store schema.

Revision ID: 0001
Revises:
Create Date: 2026-02-14 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_ENUM = sa.String(length=32)


def upgrade() -> None:
    op.create_table(
        "creators",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("external_channel_id", sa.String(), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_creators")),
    )
    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("status", _ENUM, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["creator_id"],
            ["creators.id"],
            name=op.f("fk_schedules_creator_id_creators"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_schedules")),
    )
    op.create_index("ix_schedules_slot", "schedules", ["creator_id", "date", "start_time"])
    op.create_table(
        "pending_schedules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("creator_name", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("status", _ENUM, nullable=False),
        sa.Column("action", _ENUM, nullable=False),
        sa.Column("target_entry_id", sa.Integer(), nullable=True),
        sa.Column("previous_status", _ENUM, nullable=True),
        sa.Column("previous_title", sa.Text(), nullable=True),
        sa.Column("fingerprint", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["creator_id"],
            ["creators.id"],
            name=op.f("fk_pending_schedules_creator_id_creators"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_pending_schedules")),
    )
    op.create_index(
        "ix_pending_schedules_slot",
        "pending_schedules",
        ["creator_id", "date", "start_time"],
    )
    op.create_index("ix_pending_schedules_fingerprint", "pending_schedules", ["fingerprint"])
    op.create_table(
        "update_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("action", _ENUM, nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column("actor_name", sa.String(), nullable=True),
        sa.Column("actor_ip", sa.String(), nullable=True),
        sa.Column("creator_id", sa.Integer(), nullable=True),
        sa.Column("creator_name", sa.String(), nullable=True),
        sa.Column("entry_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("status", _ENUM, nullable=True),
        sa.Column("previous_status", _ENUM, nullable=True),
        sa.Column("previous_title", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_update_logs")),
    )
    op.create_table(
        "settings",
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_settings")),
    )


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_table("update_logs")
    op.drop_index("ix_pending_schedules_fingerprint", table_name="pending_schedules")
    op.drop_index("ix_pending_schedules_slot", table_name="pending_schedules")
    op.drop_table("pending_schedules")
    op.drop_index("ix_schedules_slot", table_name="schedules")
    op.drop_table("schedules")
    op.drop_table("creators")
