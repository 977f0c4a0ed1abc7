"""SQLAlchemy mapping metadata for the schedule domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Time,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from schedsync.domain.model import (
    ActivityLogRecord,
    Creator,
    LogAction,
    ProposalAction,
    ScheduleEntry,
    ScheduleStatus,
    StagingProposal,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
        length=32,
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

creator_table = Table(
    "creators",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("external_channel_id", String, nullable=True),
    Column("archived", Boolean, nullable=False, default=False),
)

schedule_table = Table(
    "schedules",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("creator_id", Integer, ForeignKey("creators.id"), nullable=False),
    Column("date", Date, nullable=False),
    Column("start_time", Time, nullable=True),
    Column("title", Text, nullable=True),
    Column("status", _enum(ScheduleStatus), nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    # Lookup index only; confirmed slots carry no uniqueness guarantee.
    Index("ix_schedules_slot", "creator_id", "date", "start_time"),
)

pending_schedule_table = Table(
    "pending_schedules",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("creator_id", Integer, ForeignKey("creators.id"), nullable=False),
    Column("creator_name", String, nullable=False),
    Column("date", Date, nullable=False),
    Column("start_time", Time, nullable=True),
    Column("title", Text, nullable=True),
    Column("status", _enum(ScheduleStatus), nullable=False),
    Column("action", _enum(ProposalAction), nullable=False),
    Column("target_entry_id", Integer, nullable=True),
    Column("previous_status", _enum(ScheduleStatus), nullable=True),
    Column("previous_title", Text, nullable=True),
    Column("fingerprint", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Index("ix_pending_schedules_slot", "creator_id", "date", "start_time"),
    Index("ix_pending_schedules_fingerprint", "fingerprint"),
)

update_log_table = Table(
    "update_logs",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("action", _enum(LogAction), nullable=False),
    Column("entry_date", Date, nullable=False),
    Column("actor_id", String, nullable=True),
    Column("actor_name", String, nullable=True),
    Column("actor_ip", String, nullable=True),
    Column("creator_id", Integer, nullable=True),
    Column("creator_name", String, nullable=True),
    Column("entry_id", Integer, nullable=True),
    Column("title", Text, nullable=True),
    Column("status", _enum(ScheduleStatus), nullable=True),
    Column("previous_status", _enum(ScheduleStatus), nullable=True),
    Column("previous_title", Text, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
)

settings_table = Table(
    "settings",
    mapper_registry.metadata,
    Column("key", String, primary_key=True),
    Column("value", Text, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Creator, creator_table)
    mapper_registry.map_imperatively(ScheduleEntry, schedule_table)
    mapper_registry.map_imperatively(StagingProposal, pending_schedule_table)
    mapper_registry.map_imperatively(ActivityLogRecord, update_log_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
