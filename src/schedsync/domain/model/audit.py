"""Activity log records and actor attribution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Final

from .enums import LogAction

if TYPE_CHECKING:
    from .enums import ScheduleStatus
    from .staging import StagingProposal

SYSTEM_ACTOR_NAME: Final[str] = "system"


@dataclass(frozen=True, slots=True)
class Actor:
    """Opaque attribution for whoever triggered a transition."""

    actor_id: str | None = None
    name: str | None = None
    ip: str | None = None

    @classmethod
    def system(cls) -> Actor:
        return cls(name=SYSTEM_ACTOR_NAME)

    @property
    def is_system(self) -> bool:
        return self.actor_id is None and self.name == SYSTEM_ACTOR_NAME


@dataclass(eq=False, kw_only=True)
class ActivityLogRecord:
    """Append-only audit row describing one state transition."""

    action: LogAction
    entry_date: date
    actor_id: str | None = None
    actor_name: str | None = None
    actor_ip: str | None = None
    creator_id: int | None = None
    creator_name: str | None = None
    entry_id: int | None = None
    title: str | None = None
    status: ScheduleStatus | None = None
    previous_status: ScheduleStatus | None = None
    previous_title: str | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def for_proposal(
        cls,
        proposal: StagingProposal,
        *,
        action: LogAction,
        actor: Actor,
        entry_id: int | None = None,
    ) -> ActivityLogRecord:
        return cls(
            action=action,
            entry_date=proposal.date,
            actor_id=actor.actor_id,
            actor_name=actor.name,
            actor_ip=actor.ip,
            creator_id=proposal.creator_id,
            creator_name=proposal.creator_name,
            entry_id=entry_id if entry_id is not None else proposal.target_entry_id,
            title=proposal.title,
            status=proposal.status,
            previous_status=proposal.previous_status,
            previous_title=proposal.previous_title,
        )

    @classmethod
    def failure(cls, *, on: date, actor: Actor, message: str) -> ActivityLogRecord:
        return cls(
            action=LogAction.AUTO_FAILED,
            entry_date=on,
            actor_id=actor.actor_id,
            actor_name=actor.name,
            actor_ip=actor.ip,
            title=message,
        )
