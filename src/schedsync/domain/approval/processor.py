"""Two-phase approval of staged proposals.

Every approval re-reads current state inside its own unit of work: ``create``
proposals re-run the tolerance check against the confirmed entries of that
creator and day, ``update`` proposals re-verify that their target still exists.
A blocked approval raises and leaves the proposal staged so an operator can
retry after resolving it by hand. Rejection has no business rule and always
discards the proposal.

Bulk calls report every item independently and never roll back earlier
successes. ``create`` approvals run strictly one after another because the
conflict check is a read-then-write; rejections and ``update`` approvals, which
target already-identified rows, fan out with bounded concurrency.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from schedsync.common.concurrency import run_blocking_map
from schedsync.config.reconciliation import ApprovalConfig
from schedsync.domain.broadcast_time import format_hhmm
from schedsync.domain.errors import (
    ConflictError,
    FailureReason,
    NotFoundError,
    ScheduleSyncError,
    classify,
)
from schedsync.domain.matching import find_matching_entry
from schedsync.domain.model import (
    ActivityLogRecord,
    Actor,
    LogAction,
    ProposalAction,
    ScheduleEntry,
)

from .ids import parse_proposal_id, parse_proposal_ids
from .results import ApprovalOutcome, BulkResult, ItemResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from schedsync.domain.model import StagingProposal
    from schedsync.domain.ports import ScheduleRepositories, ScheduleUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class ApprovalProcessor:
    """Commit or discard staged proposals on behalf of ``actor``."""

    unit_of_work_factory: Callable[[], ScheduleUnitOfWork]
    actor: Actor = field(default_factory=Actor.system)
    config: ApprovalConfig = field(default_factory=ApprovalConfig)

    def list_pending(self) -> list[StagingProposal]:
        """Return the staging set, newest first."""

        with self.unit_of_work_factory() as uow:
            proposals = list(uow.repositories.staging.list_all())
        return sorted(proposals, key=lambda item: (item.created_at, item.id or 0), reverse=True)

    # single ------------------------------------------------------------------

    def approve(self, proposal_id: object) -> ApprovalOutcome:
        pid = parse_proposal_id(proposal_id)
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            proposal = repositories.staging.get(pid)
            if proposal is None:
                raise NotFoundError(f"Proposal {pid} not found")

            if proposal.action is ProposalAction.CREATE:
                entry_id = self._create_entry(repositories, proposal)
            else:
                entry_id = self._update_entry(repositories, proposal)

            repositories.activity_log.append(
                ActivityLogRecord.for_proposal(
                    proposal,
                    action=LogAction.APPROVED,
                    actor=self.actor,
                    entry_id=entry_id,
                )
            )
            repositories.staging.delete(proposal)
            uow.commit()

        log.info("Approved proposal %s (%s) -> entry %s", pid, proposal.action, entry_id)
        return ApprovalOutcome(proposal_id=pid, action=proposal.action, entry_id=entry_id)

    def reject(self, proposal_id: object) -> ApprovalOutcome:
        pid = parse_proposal_id(proposal_id)
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            proposal = repositories.staging.get(pid)
            if proposal is None:
                raise NotFoundError(f"Proposal {pid} not found")
            repositories.activity_log.append(
                ActivityLogRecord.for_proposal(
                    proposal,
                    action=LogAction.REJECTED,
                    actor=self.actor,
                )
            )
            repositories.staging.delete(proposal)
            uow.commit()

        log.info("Rejected proposal %s (%s)", pid, proposal.action)
        return ApprovalOutcome(
            proposal_id=pid,
            action=proposal.action,
            entry_id=proposal.target_entry_id,
            rejected=True,
        )

    # bulk --------------------------------------------------------------------

    def approve_many(self, proposal_ids: object) -> BulkResult:
        targets = parse_proposal_ids(proposal_ids)
        return self._approve_batch(targets)

    def reject_many(self, proposal_ids: object) -> BulkResult:
        targets = parse_proposal_ids(proposal_ids)
        return self._reject_batch(targets)

    def approve_all(self) -> BulkResult:
        return self._approve_batch(self._staged_ids())

    def reject_all(self) -> BulkResult:
        return self._reject_batch(self._staged_ids())

    def _staged_ids(self) -> list[int]:
        with self.unit_of_work_factory() as uow:
            proposals = uow.repositories.staging.list_all()
            return [proposal.id for proposal in proposals if proposal.id is not None]

    def _approve_batch(self, targets: Sequence[int]) -> BulkResult:
        if not targets:
            return BulkResult()
        actions = self._actions_for(targets)
        creates = [pid for pid in targets if actions.get(pid) is ProposalAction.CREATE]
        others = [pid for pid in targets if actions.get(pid) is not ProposalAction.CREATE]

        by_id: dict[int, ItemResult] = {}
        for pid in creates:
            by_id[pid] = self._try(self.approve, pid)
        concurrent = run_blocking_map(
            others,
            lambda pid: self._try(self.approve, pid),
            concurrency=self.config.update_concurrency,
        )
        by_id.update(zip(others, concurrent, strict=True))
        return self._report("approve", targets, by_id)

    def _reject_batch(self, targets: Sequence[int]) -> BulkResult:
        if not targets:
            return BulkResult()
        outcomes = run_blocking_map(
            targets,
            lambda pid: self._try(self.reject, pid),
            concurrency=self.config.reject_concurrency,
        )
        return self._report("reject", targets, dict(zip(targets, outcomes, strict=True)))

    def _actions_for(self, targets: Sequence[int]) -> dict[int, ProposalAction]:
        actions: dict[int, ProposalAction] = {}
        with self.unit_of_work_factory() as uow:
            for pid in targets:
                proposal = uow.repositories.staging.get(pid)
                if proposal is not None:
                    actions[pid] = proposal.action
        return actions

    def _try(self, operation: Callable[[int], ApprovalOutcome], pid: int) -> ItemResult:
        try:
            return ItemResult.succeeded(operation(pid))
        except ScheduleSyncError as exc:
            return ItemResult.failed(pid, classify(exc), str(exc))
        except Exception:
            log.exception("Unexpected failure processing proposal %s", pid)
            return ItemResult.failed(pid, FailureReason.ERROR, "Processing failed")

    def _report(
        self,
        verb: str,
        targets: Sequence[int],
        by_id: dict[int, ItemResult],
    ) -> BulkResult:
        result = BulkResult(results=tuple(by_id[pid] for pid in targets))
        log.info(
            "Bulk %s: requested=%s, succeeded=%s, failed=%s",
            verb,
            result.total_requested,
            result.success_count,
            result.failed_count,
        )
        return result

    # state transitions -------------------------------------------------------

    def _create_entry(
        self,
        repositories: ScheduleRepositories,
        proposal: StagingProposal,
    ) -> int | None:
        existing = repositories.schedules.list_for_day(proposal.creator_id, proposal.date)
        conflicting = find_matching_entry(
            existing,
            proposal.start_time,
            tolerance_minutes=self.config.tolerance_minutes,
        )
        if conflicting is not None:
            conflicting_time = format_hhmm(conflicting.start_time)
            raise ConflictError(
                f"An entry already exists at a similar time ({conflicting_time})",
                conflicting_entry_id=conflicting.id,
                conflicting_time=conflicting.start_time,
            )

        entry = ScheduleEntry(
            creator_id=proposal.creator_id,
            date=proposal.date,
            start_time=proposal.start_time,
            title=proposal.title,
            status=proposal.status,
        )
        repositories.schedules.add(entry)
        return entry.id

    def _update_entry(
        self,
        repositories: ScheduleRepositories,
        proposal: StagingProposal,
    ) -> int | None:
        target_id = proposal.target_entry_id
        target = repositories.schedules.get(target_id) if target_id is not None else None
        if target is None:
            raise NotFoundError(f"Target entry {target_id} for proposal {proposal.id} was deleted")

        target.apply(
            start_time=proposal.start_time,
            title=proposal.title,
            status=proposal.status,
        )
        repositories.schedules.update(target)
        return target.id
