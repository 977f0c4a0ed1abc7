"""Result types reported by a reconciliation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, time

    from schedsync.domain.model import (
        Creator,
        ProposalAction,
        ScheduleStatus,
        StagingProposal,
        Video,
    )


@dataclass(frozen=True, slots=True)
class ReconciliationDetail:
    """Operator-facing description of one staged occurrence."""

    creator_id: int
    creator_name: str
    entry_id: int | None
    date: date
    start_time: time | None
    action: ProposalAction
    title: str | None
    previous_status: ScheduleStatus | None
    fingerprint: str

    @classmethod
    def from_proposal(cls, proposal: StagingProposal) -> ReconciliationDetail:
        return cls(
            creator_id=proposal.creator_id,
            creator_name=proposal.creator_name,
            entry_id=proposal.target_entry_id,
            date=proposal.date,
            start_time=proposal.start_time,
            action=proposal.action,
            title=proposal.title,
            previous_status=proposal.previous_status,
            fingerprint=proposal.fingerprint,
        )


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    checked: int
    proposals_created: int
    details: tuple[ReconciliationDetail, ...] = ()
    failed_creator_ids: tuple[int, ...] = ()

    @classmethod
    def empty(cls) -> ReconciliationResult:
        return cls(checked=0, proposals_created=0)


@dataclass(slots=True)
class CreatorListing:
    """Videos fetched for one creator; ``failed`` marks an absorbed fetch error."""

    creator: Creator
    videos: list[Video] = field(default_factory=list["Video"])
    failed: bool = False
