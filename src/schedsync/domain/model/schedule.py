"""Creators and their confirmed calendar entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time

from .enums import ScheduleStatus


@dataclass(eq=False, kw_only=True)
class Creator:
    """A tracked creator whose published videos are monitored."""

    name: str
    external_channel_id: str | None = None
    archived: bool = False
    id: int | None = None

    @property
    def is_trackable(self) -> bool:
        return bool(self.external_channel_id and self.external_channel_id.strip())


@dataclass(eq=False, kw_only=True)
class ScheduleEntry:
    """A confirmed, user-visible calendar record."""

    creator_id: int
    date: date
    status: ScheduleStatus
    start_time: time | None = None
    title: str | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())

    @property
    def is_confirmed_live(self) -> bool:
        return self.status is ScheduleStatus.LIVE and self.has_title

    def apply(
        self,
        *,
        start_time: time | None,
        title: str | None,
        status: ScheduleStatus,
    ) -> None:
        self.start_time = start_time
        self.title = title
        self.status = status
