"""Defaults for the reconciliation scan and the approval workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import int_from_env
from .errors import ConfigurationError

DEFAULT_TZ_OFFSET_HOURS: Final[int] = 9
DEFAULT_FETCH_CONCURRENCY: Final[int] = 10
DEFAULT_CHUNK_SIZE: Final[int] = 50
DEFAULT_PAGE_SIZE: Final[int] = 15
DEFAULT_TOLERANCE_MINUTES: Final[int] = 30
DEFAULT_RANGE_DAYS: Final[int] = 3
DEFAULT_SOURCE_NAME: Final[str] = "chzzk"
DEFAULT_BULK_CONCURRENCY: Final[int] = 10


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    tz_offset_hours: int = DEFAULT_TZ_OFFSET_HOURS
    fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY
    chunk_size: int = DEFAULT_CHUNK_SIZE
    page_size: int = DEFAULT_PAGE_SIZE
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES
    source_name: str = DEFAULT_SOURCE_NAME

    def __post_init__(self) -> None:
        if self.fetch_concurrency < 1:
            raise ConfigurationError(
                "fetch_concurrency must be at least 1",
                setting="fetch_concurrency",
            )
        if self.chunk_size < 1:
            raise ConfigurationError("chunk_size must be at least 1", setting="chunk_size")
        if not -12 <= self.tz_offset_hours <= 14:
            raise ConfigurationError(
                "tz_offset_hours must be between -12 and 14",
                setting="tz_offset_hours",
            )


@dataclass(frozen=True, slots=True)
class ApprovalConfig:
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES
    reject_concurrency: int = DEFAULT_BULK_CONCURRENCY
    update_concurrency: int = DEFAULT_BULK_CONCURRENCY


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        tz_offset_hours=int_from_env("SCHEDSYNC_TZ_OFFSET_HOURS", DEFAULT_TZ_OFFSET_HOURS),
        fetch_concurrency=int_from_env("SCHEDSYNC_FETCH_CONCURRENCY", DEFAULT_FETCH_CONCURRENCY),
    )


def get_approval_config() -> ApprovalConfig:
    return ApprovalConfig()
