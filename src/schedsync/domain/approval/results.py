"""Outcomes reported by approval and rejection calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schedsync.domain.errors import FailureReason
    from schedsync.domain.model import ProposalAction


@dataclass(frozen=True, slots=True)
class ApprovalOutcome:
    """Definite result of a successful single approve or reject."""

    proposal_id: int
    action: ProposalAction
    entry_id: int | None = None
    rejected: bool = False


@dataclass(frozen=True, slots=True)
class ItemResult:
    proposal_id: int
    success: bool
    action: ProposalAction | None = None
    entry_id: int | None = None
    rejected: bool = False
    reason: FailureReason | None = None
    message: str | None = None

    @classmethod
    def succeeded(cls, outcome: ApprovalOutcome) -> ItemResult:
        return cls(
            proposal_id=outcome.proposal_id,
            success=True,
            action=outcome.action,
            entry_id=outcome.entry_id,
            rejected=outcome.rejected,
        )

    @classmethod
    def failed(cls, proposal_id: int, reason: FailureReason, message: str) -> ItemResult:
        return cls(proposal_id=proposal_id, success=False, reason=reason, message=message)


@dataclass(frozen=True, slots=True)
class BulkResult:
    """Itemized results of a bulk call, in request order."""

    results: tuple[ItemResult, ...] = ()

    @property
    def total_requested(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed_count(self) -> int:
        return self.total_requested - self.success_count

    @property
    def failures(self) -> tuple[ItemResult, ...]:
        return tuple(result for result in self.results if not result.success)
