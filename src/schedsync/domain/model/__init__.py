"""Public domain model surface."""

from __future__ import annotations

from schedsync.domain.model.audit import SYSTEM_ACTOR_NAME, ActivityLogRecord, Actor
from schedsync.domain.model.enums import LogAction, ProposalAction, ScheduleStatus
from schedsync.domain.model.schedule import Creator, ScheduleEntry
from schedsync.domain.model.staging import StagingKey, StagingProposal
from schedsync.domain.model.video import Video

__all__ = [
    "SYSTEM_ACTOR_NAME",
    "ActivityLogRecord",
    "Actor",
    "Creator",
    "LogAction",
    "ProposalAction",
    "ScheduleEntry",
    "ScheduleStatus",
    "StagingKey",
    "StagingProposal",
    "Video",
]
