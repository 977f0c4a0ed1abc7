"""Read-side filters and paging over the activity log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from schedsync.domain.errors import ValidationError

if TYPE_CHECKING:
    from datetime import date

    from schedsync.domain.model import ActivityLogRecord, LogAction

DEFAULT_PAGE_SIZE: Final[int] = 50
MAX_PAGE_SIZE: Final[int] = 200


class ActivitySort(StrEnum):
    CREATED_DESC = "created_desc"
    CREATED_ASC = "created_asc"
    SCHEDULE_DESC = "schedule_desc"
    SCHEDULE_ASC = "schedule_asc"
    ACTION_ASC = "action_asc"


@dataclass(frozen=True, slots=True)
class ActivityQuery:
    """Filters for browsing the activity log, newest first by default.

    ``creator`` and ``text`` are case-insensitive substring matches; ``text``
    looks at both the title and the creator name. ``date_from`` and
    ``date_to`` bound the schedule date inclusively.
    """

    action: LogAction | None = None
    creator: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    text: str | None = None
    sort: ActivitySort = ActivitySort.CREATED_DESC
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValidationError("date_from must not be after date_to")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True, slots=True)
class ActivityPage:
    items: tuple[ActivityLogRecord, ...]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 1
        return -(-self.total // self.page_size)

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages
