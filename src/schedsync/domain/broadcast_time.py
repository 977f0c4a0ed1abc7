"""Target time-zone helpers and broadcast start inference."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta, timezone, tzinfo
from typing import TYPE_CHECKING, Protocol

from schedsync.config.reconciliation import DEFAULT_TZ_OFFSET_HOURS

if TYPE_CHECKING:
    from schedsync.domain.model import Video


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def fixed_offset(hours: int) -> tzinfo:
    return timezone(timedelta(hours=hours))


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Clock values must include timezone information")
    return value


@dataclass(frozen=True)
class TargetClock:
    """Wall clock observed in the deployment's target time zone."""

    tz: tzinfo = field(default_factory=lambda: fixed_offset(DEFAULT_TZ_OFFSET_HOURS))
    clock: Clock = _utcnow

    @classmethod
    def with_offset(cls, hours: int, *, clock: Clock = _utcnow) -> TargetClock:
        return cls(tz=fixed_offset(hours), clock=clock)

    def now(self) -> datetime:
        return _ensure_aware(self.clock()).astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()

    def localize(self, instant: datetime) -> datetime:
        return _ensure_aware(instant).astimezone(self.tz)


@dataclass(frozen=True, slots=True)
class BroadcastStart:
    """Inferred start of a broadcast, expressed in the target time zone."""

    date: date
    start_time: time
    instant: datetime


def infer_broadcast_start(video: Video, tz: tzinfo) -> BroadcastStart:
    """Return the stream's real start, not its publish (VOD) time.

    The local time is truncated to whole minutes so it compares cleanly with
    ``HH:MM`` calendar entries.
    """

    local = video.started_at.astimezone(tz)
    return BroadcastStart(
        date=local.date(),
        start_time=time(local.hour, local.minute),
        instant=local,
    )


@dataclass(frozen=True, slots=True)
class ScanWindow:
    """Inclusive range of calendar days inspected by one reconciliation run."""

    start: date
    end: date

    @classmethod
    def for_range(cls, range_days: int, clock: TargetClock) -> ScanWindow:
        if range_days < 0:
            raise ValueError("Range days must be non-negative")
        now = clock.now()
        return cls(start=(now - timedelta(days=range_days)).date(), end=now.date())

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def parse_hhmm(value: str) -> time:
    """Parse an ``HH:MM`` string into a ``time``."""

    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except ValueError as exc:
        raise ValueError(f"Invalid HH:MM time: {value!r}") from exc


def format_hhmm(value: time | None) -> str:
    return value.strftime("%H:%M") if value is not None else ""


__all__ = [
    "BroadcastStart",
    "Clock",
    "ScanWindow",
    "TargetClock",
    "fixed_offset",
    "format_hhmm",
    "infer_broadcast_start",
    "parse_hhmm",
]
