"""SQLAlchemy adapter package for schedsync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyActivityLog,
    SqlAlchemyCreatorDirectory,
    SqlAlchemyScheduleRepository,
    SqlAlchemySettingsRepository,
    SqlAlchemyStagingRepository,
)
from .unit_of_work import (
    SqlAlchemyScheduleUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyActivityLog",
    "SqlAlchemyCreatorDirectory",
    "SqlAlchemyScheduleRepository",
    "SqlAlchemyScheduleUnitOfWork",
    "SqlAlchemySettingsRepository",
    "SqlAlchemyStagingRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
