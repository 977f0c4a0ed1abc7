"""Operator approval workflow for staged proposals."""

from __future__ import annotations

from .ids import parse_proposal_id, parse_proposal_ids
from .processor import ApprovalProcessor
from .results import ApprovalOutcome, BulkResult, ItemResult

__all__ = [
    "ApprovalOutcome",
    "ApprovalProcessor",
    "BulkResult",
    "ItemResult",
    "parse_proposal_id",
    "parse_proposal_ids",
]
