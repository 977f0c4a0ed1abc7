"""Decision rule mapping one observed broadcast onto the confirmed calendar."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schedsync.config.reconciliation import DEFAULT_TOLERANCE_MINUTES
from schedsync.domain.matching import find_matching_entry
from schedsync.domain.model import ProposalAction, ScheduleStatus, StagingProposal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from schedsync.domain.broadcast_time import BroadcastStart
    from schedsync.domain.model import Creator, ScheduleEntry, Video


def decide(
    *,
    creator: Creator,
    video: Video,
    start: BroadcastStart,
    entries: Sequence[ScheduleEntry],
    fingerprint: str,
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
) -> StagingProposal | None:
    """Return the single proposal implied by ``video``, or ``None`` if nothing changes.

    - no entry inside the tolerance window: stage a ``create``
    - a matching entry that is not live or has a blank title: stage an ``update``
    - a matching live entry with a title: already correct
    """

    if creator.id is None:
        raise ValueError("creator must be persisted before reconciliation")

    match = find_matching_entry(entries, start.start_time, tolerance_minutes=tolerance_minutes)
    if match is None:
        return StagingProposal(
            creator_id=creator.id,
            creator_name=creator.name,
            date=start.date,
            start_time=start.start_time,
            title=video.title,
            status=ScheduleStatus.LIVE,
            action=ProposalAction.CREATE,
            fingerprint=fingerprint,
        )
    if match.is_confirmed_live:
        return None
    return StagingProposal(
        creator_id=creator.id,
        creator_name=creator.name,
        date=start.date,
        start_time=start.start_time,
        title=video.title,
        status=ScheduleStatus.LIVE,
        action=ProposalAction.UPDATE,
        target_entry_id=match.id,
        previous_status=match.status,
        previous_title=match.title,
        fingerprint=fingerprint,
    )
