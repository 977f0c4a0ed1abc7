"""Ports for persisting schedule aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date

    from schedsync.domain.activity import ActivityPage, ActivityQuery
    from schedsync.domain.model import (
        ActivityLogRecord,
        Creator,
        ScheduleEntry,
        StagingProposal,
    )


@runtime_checkable
class CreatorDirectory(Protocol):
    """Tracked creators; read-only from the reconciliation core."""

    def list_active(self) -> Sequence[Creator]: ...

    def list_all(self) -> Sequence[Creator]: ...

    def add(self, creator: Creator) -> None: ...


@runtime_checkable
class ScheduleRepository(Protocol):
    """Confirmed calendar entries."""

    def list_between(self, start: date, end: date) -> Sequence[ScheduleEntry]: ...

    def list_for_day(self, creator_id: int, day: date) -> Sequence[ScheduleEntry]: ...

    def get(self, entry_id: int) -> ScheduleEntry | None: ...

    def add(self, entry: ScheduleEntry) -> None: ...

    def update(self, entry: ScheduleEntry) -> None: ...


@runtime_checkable
class StagingRepository(Protocol):
    """Pending proposals awaiting approval."""

    def list_all(self) -> Sequence[StagingProposal]: ...

    def get(self, proposal_id: int) -> StagingProposal | None: ...

    def add_many(self, proposals: Iterable[StagingProposal]) -> None: ...

    def delete(self, proposal: StagingProposal) -> None: ...


@runtime_checkable
class ActivityLog(Protocol):
    """Append-only audit trail; ``search`` serves the operator view."""

    def append(self, record: ActivityLogRecord) -> None: ...

    def append_many(self, records: Iterable[ActivityLogRecord]) -> None: ...

    def search(self, query: ActivityQuery) -> ActivityPage: ...


@runtime_checkable
class SettingsRepository(Protocol):
    """Persisted string key/value settings."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...
