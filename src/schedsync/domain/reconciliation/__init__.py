"""Reconciliation of published videos against the confirmed calendar."""

from __future__ import annotations

from .contracts import CreatorListing, ReconciliationDetail, ReconciliationResult
from .engine import ReconciliationEngine
from .plan import decide

__all__ = [
    "CreatorListing",
    "ReconciliationDetail",
    "ReconciliationEngine",
    "ReconciliationResult",
    "decide",
]
