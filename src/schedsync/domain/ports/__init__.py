"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import VideoCache, VideoCacheKey, VideoSource
from .persistence import (
    ActivityLog,
    CreatorDirectory,
    ScheduleRepository,
    SettingsRepository,
    StagingRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    ScheduleRepositories,
    ScheduleUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ActivityLog",
    "CreatorDirectory",
    "RepositoryCollection",
    "ScheduleRepositories",
    "ScheduleRepository",
    "ScheduleUnitOfWork",
    "SettingsRepository",
    "StagingRepository",
    "UnitOfWork",
    "VideoCache",
    "VideoCacheKey",
    "VideoSource",
]
