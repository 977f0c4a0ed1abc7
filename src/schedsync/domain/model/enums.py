"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ScheduleStatus(StrEnum):
    LIVE = "live"
    OFF = "off"
    SURPRISE = "surprise"
    UNDECIDED = "undecided"


class ProposalAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"


class LogAction(StrEnum):
    """Transitions recorded in the activity log."""

    COLLECTED = "collected"
    APPROVED = "approved"
    REJECTED = "rejected"
    CREATED = "created"
    UPDATED = "updated"
    AUTO_FAILED = "auto_failed"
