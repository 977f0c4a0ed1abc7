"""Staged proposals awaiting operator approval."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time

from .enums import ProposalAction, ScheduleStatus

type StagingKey = tuple[int, date, time | None]


@dataclass(eq=False, kw_only=True)
class StagingProposal:
    """An auto-detected candidate change to the confirmed calendar.

    Proposals are created by the reconciliation scan and destroyed by approval or
    rejection; they are never edited in place. ``previous_status`` and
    ``previous_title`` capture the target entry as it looked at staging time.
    """

    creator_id: int
    creator_name: str
    date: date
    action: ProposalAction
    fingerprint: str
    start_time: time | None = None
    title: str | None = None
    status: ScheduleStatus = ScheduleStatus.LIVE
    target_entry_id: int | None = None
    previous_status: ScheduleStatus | None = None
    previous_title: str | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def __post_init__(self) -> None:
        if self.action is ProposalAction.UPDATE and self.target_entry_id is None:
            raise ValueError("update proposals require a target entry id")
        if self.action is ProposalAction.CREATE and self.target_entry_id is not None:
            raise ValueError("create proposals cannot target an existing entry")

    @property
    def key(self) -> StagingKey:
        return (self.creator_id, self.date, self.start_time)
