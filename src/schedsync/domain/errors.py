"""Error taxonomy for reconciliation and approval."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import time


class ScheduleSyncError(Exception):
    """Base class for domain errors raised by schedsync."""


class ValidationError(ScheduleSyncError, ValueError):
    """Raised for malformed or missing identifiers and arguments."""


class NotFoundError(ScheduleSyncError, LookupError):
    """Raised when a proposal or its target entry no longer exists."""


class ConflictError(ScheduleSyncError):
    """Raised when a near-duplicate confirmed entry exists at approval time."""

    def __init__(
        self,
        message: str,
        *,
        conflicting_entry_id: int | None,
        conflicting_time: time | None,
    ) -> None:
        super().__init__(message)
        self.conflicting_entry_id = conflicting_entry_id
        self.conflicting_time = conflicting_time


class TransientFetchError(ScheduleSyncError):
    """Raised by video sources when one creator's listing could not be fetched."""

    def __init__(self, message: str, *, channel_id: str | None = None) -> None:
        super().__init__(message)
        self.channel_id = channel_id


class PersistenceError(ScheduleSyncError):
    """Raised when a store write fails; already-committed work is not rolled back."""


class FailureReason(StrEnum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    ERROR = "error"


def classify(exc: BaseException) -> FailureReason:
    if isinstance(exc, ConflictError):
        return FailureReason.CONFLICT
    if isinstance(exc, NotFoundError):
        return FailureReason.NOT_FOUND
    return FailureReason.ERROR
