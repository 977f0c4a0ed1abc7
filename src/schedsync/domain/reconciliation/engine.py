"""Scan-and-diff loop that stages proposals from recently published videos.

One run loads the active creators, the confirmed entries inside the lookback
window and the current staging set, fetches every creator's recent videos with
bounded concurrency, decides at most one proposal per video, and persists the
new proposals plus their ``collected`` log rows in fixed-size chunks.

Overlapping runs are not locked against each other. Re-running is safe because
every video is fingerprinted and every (creator, date, start time) slot is
checked against the staging set before anything is staged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from schedsync.common.concurrency import bounded_map
from schedsync.config.reconciliation import DEFAULT_RANGE_DAYS, ReconciliationConfig
from schedsync.domain.broadcast_time import ScanWindow, TargetClock, infer_broadcast_start
from schedsync.domain.errors import PersistenceError, TransientFetchError
from schedsync.domain.matching import StagingIndex, group_by_creator_day
from schedsync.domain.model import ActivityLogRecord, Actor, LogAction

from .contracts import CreatorListing, ReconciliationDetail, ReconciliationResult
from .plan import decide

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import date

    from schedsync.domain.model import Creator, ScheduleEntry, StagingProposal, Video
    from schedsync.domain.ports import ScheduleUnitOfWork, VideoSource

log = getLogger(__name__)


@dataclass(slots=True)
class _Snapshot:
    creators: list[Creator]
    entries_by_day: dict[tuple[int, date], list[ScheduleEntry]]
    index: StagingIndex


@dataclass(slots=True)
class _Plan:
    checked: int = 0
    proposals: list[StagingProposal] = field(default_factory=list["StagingProposal"])
    records: list[ActivityLogRecord] = field(default_factory=list[ActivityLogRecord])
    details: list[ReconciliationDetail] = field(default_factory=list[ReconciliationDetail])


@dataclass(slots=True)
class ReconciliationEngine:
    """Run one reconciliation scan from video listings to staged proposals."""

    source: VideoSource
    unit_of_work_factory: Callable[[], ScheduleUnitOfWork]
    clock: TargetClock = field(default_factory=TargetClock)
    config: ReconciliationConfig = field(default_factory=ReconciliationConfig)

    def run(
        self,
        range_days: int = DEFAULT_RANGE_DAYS,
        *,
        actor: Actor | None = None,
    ) -> ReconciliationResult:
        """Scan the last ``range_days`` days and stage what changed.

        ``actor`` is credited with an ``auto_failed`` row if persisting fails;
        proposals and ``collected`` rows are always attributed to the system.
        """

        window = ScanWindow.for_range(range_days, self.clock)
        snapshot = self._load_snapshot(window)
        if not snapshot.creators:
            log.info("No active creators; nothing to reconcile")
            return ReconciliationResult.empty()

        log.info(
            "Starting reconciliation: creators=%s, window=%s..%s, staged=%s",
            len(snapshot.creators),
            window.start,
            window.end,
            len(snapshot.index.fingerprints),
        )
        listings = asyncio.run(self._fetch_all(snapshot.creators))
        plan = self._plan(listings, snapshot, window)
        self._persist(plan, window, actor or Actor.system())

        result = ReconciliationResult(
            checked=plan.checked,
            proposals_created=len(plan.proposals),
            details=tuple(plan.details),
            failed_creator_ids=tuple(
                listing.creator.id
                for listing in listings
                if listing.failed and listing.creator.id is not None
            ),
        )
        log.info(
            "Finished reconciliation: checked=%s, staged=%s, failed_creators=%s",
            result.checked,
            result.proposals_created,
            len(result.failed_creator_ids),
        )
        return result

    def _load_snapshot(self, window: ScanWindow) -> _Snapshot:
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            creators = list(repositories.creators.list_active())
            entries = repositories.schedules.list_between(window.start, window.end)
            staged = repositories.staging.list_all()
            return _Snapshot(
                creators=creators,
                entries_by_day=group_by_creator_day(entries),
                index=StagingIndex.build(staged),
            )

    async def _fetch_all(self, creators: Sequence[Creator]) -> list[CreatorListing]:
        return await bounded_map(
            creators,
            self._fetch_creator,
            concurrency=self.config.fetch_concurrency,
        )

    async def _fetch_creator(self, creator: Creator) -> CreatorListing:
        if not creator.is_trackable or creator.external_channel_id is None:
            return CreatorListing(creator=creator)
        try:
            videos = await self.source.list_recent(
                creator.external_channel_id.strip(),
                page=0,
                size=self.config.page_size,
            )
        except TransientFetchError as exc:
            log.warning("Skipping creator %s (%s): %s", creator.id, creator.name, exc)
            return CreatorListing(creator=creator, failed=True)
        except Exception:
            log.exception("Unexpected failure listing videos for creator %s", creator.id)
            return CreatorListing(creator=creator, failed=True)
        return CreatorListing(creator=creator, videos=list(videos)[: self.config.page_size])

    def _plan(
        self,
        listings: Sequence[CreatorListing],
        snapshot: _Snapshot,
        window: ScanWindow,
    ) -> _Plan:
        plan = _Plan()
        system = Actor.system()
        index = snapshot.index
        for listing in listings:
            creator = listing.creator
            if creator.id is None:
                continue
            for video in listing.videos:
                proposal = self._consider(creator, video, snapshot, index, window, plan)
                if proposal is None:
                    continue
                index.add(proposal)
                plan.proposals.append(proposal)
                plan.records.append(
                    ActivityLogRecord.for_proposal(
                        proposal,
                        action=LogAction.COLLECTED,
                        actor=system,
                    )
                )
                plan.details.append(ReconciliationDetail.from_proposal(proposal))
        return plan

    def _consider(
        self,
        creator: Creator,
        video: Video,
        snapshot: _Snapshot,
        index: StagingIndex,
        window: ScanWindow,
        plan: _Plan,
    ) -> StagingProposal | None:
        fingerprint = video.fingerprint(self.config.source_name)
        if index.has_fingerprint(fingerprint):
            return None

        start = infer_broadcast_start(video, self.clock.tz)
        if not window.contains(start.date):
            return None
        plan.checked += 1

        if creator.id is None or index.has_key(creator.id, start.date, start.start_time):
            return None

        return decide(
            creator=creator,
            video=video,
            start=start,
            entries=snapshot.entries_by_day.get((creator.id, start.date), ()),
            fingerprint=fingerprint,
            tolerance_minutes=self.config.tolerance_minutes,
        )

    def _persist(self, plan: _Plan, window: ScanWindow, actor: Actor) -> None:
        if not plan.proposals:
            return
        try:
            for chunk in batched(plan.proposals, self.config.chunk_size):
                with self.unit_of_work_factory() as uow:
                    uow.repositories.staging.add_many(chunk)
                    uow.commit()
            for chunk in batched(plan.records, self.config.chunk_size):
                with self.unit_of_work_factory() as uow:
                    uow.repositories.activity_log.append_many(chunk)
                    uow.commit()
        except Exception as exc:
            log.exception("Persisting reconciliation results failed")
            self._record_failure(window, exc, actor)
            raise PersistenceError("Failed to persist staged proposals") from exc

    def _record_failure(self, window: ScanWindow, exc: Exception, actor: Actor) -> None:
        record = ActivityLogRecord.failure(
            on=window.end,
            actor=actor,
            message=f"auto update failed: {exc}",
        )
        try:
            with self.unit_of_work_factory() as uow:
                uow.repositories.activity_log.append(record)
                uow.commit()
        except Exception:
            log.exception("Could not record auto_failed entry")
