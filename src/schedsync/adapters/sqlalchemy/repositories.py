"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, insert, or_, select, update

from schedsync.adapters.sqlalchemy.mappings import (
    creator_table,
    pending_schedule_table,
    schedule_table,
    settings_table,
    update_log_table,
)
from schedsync.domain.activity import ActivityPage, ActivityQuery, ActivitySort
from schedsync.domain.model import (
    ActivityLogRecord,
    Creator,
    ScheduleEntry,
    StagingProposal,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session


class SqlAlchemyCreatorDirectory:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_active(self) -> list[Creator]:
        stmt = (
            select(Creator)
            .where(creator_table.c.archived.is_(False))
            .order_by(creator_table.c.id)
        )
        return list(self.session.scalars(stmt))

    def list_all(self) -> list[Creator]:
        stmt = select(Creator).order_by(creator_table.c.id)
        return list(self.session.scalars(stmt))

    def add(self, creator: Creator) -> None:
        self.session.add(creator)
        self.session.flush()


class SqlAlchemyScheduleRepository:
    """Confirmed entries; ``add`` flushes so the new id is available to callers."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_between(self, start: date, end: date) -> list[ScheduleEntry]:
        stmt = (
            select(ScheduleEntry)
            .where(schedule_table.c.date >= start)
            .where(schedule_table.c.date <= end)
            .order_by(schedule_table.c.date, schedule_table.c.id)
        )
        return list(self.session.scalars(stmt))

    def list_for_day(self, creator_id: int, day: date) -> list[ScheduleEntry]:
        stmt = (
            select(ScheduleEntry)
            .where(schedule_table.c.creator_id == creator_id)
            .where(schedule_table.c.date == day)
            .order_by(schedule_table.c.id)
        )
        return list(self.session.scalars(stmt))

    def get(self, entry_id: int) -> ScheduleEntry | None:
        return self.session.get(ScheduleEntry, entry_id)

    def add(self, entry: ScheduleEntry) -> None:
        self.session.add(entry)
        self.session.flush()

    def update(self, entry: ScheduleEntry) -> None:
        self.session.add(entry)


class SqlAlchemyStagingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[StagingProposal]:
        stmt = select(StagingProposal).order_by(pending_schedule_table.c.id)
        return list(self.session.scalars(stmt))

    def get(self, proposal_id: int) -> StagingProposal | None:
        return self.session.get(StagingProposal, proposal_id)

    def add_many(self, proposals: Iterable[StagingProposal]) -> None:
        self.session.add_all(list(proposals))
        self.session.flush()

    def delete(self, proposal: StagingProposal) -> None:
        self.session.delete(proposal)


_logs = update_log_table.c

_ACTIVITY_ORDERING: dict[ActivitySort, tuple[ColumnElement[object], ...]] = {
    ActivitySort.CREATED_DESC: (_logs.created_at.desc(), _logs.id.desc()),
    ActivitySort.CREATED_ASC: (_logs.created_at.asc(), _logs.id.asc()),
    ActivitySort.SCHEDULE_DESC: (
        _logs.entry_date.desc(),
        _logs.created_at.desc(),
        _logs.id.desc(),
    ),
    ActivitySort.SCHEDULE_ASC: (
        _logs.entry_date.asc(),
        _logs.created_at.asc(),
        _logs.id.asc(),
    ),
    ActivitySort.ACTION_ASC: (_logs.action.asc(), _logs.created_at.desc(), _logs.id.desc()),
}


def _contains(column: ColumnElement[str | None], needle: str) -> ColumnElement[bool]:
    return func.lower(func.coalesce(column, "")).like(f"%{needle.lower()}%")


def _activity_filters(query: ActivityQuery) -> list[ColumnElement[bool]]:
    filters: list[ColumnElement[bool]] = []
    if query.action is not None:
        filters.append(_logs.action == query.action)
    if query.creator:
        filters.append(_contains(_logs.creator_name, query.creator))
    if query.date_from is not None:
        filters.append(_logs.entry_date >= query.date_from)
    if query.date_to is not None:
        filters.append(_logs.entry_date <= query.date_to)
    if query.text:
        filters.append(
            or_(_contains(_logs.title, query.text), _contains(_logs.creator_name, query.text))
        )
    return filters


class SqlAlchemyActivityLog:
    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, record: ActivityLogRecord) -> None:
        self.session.add(record)

    def append_many(self, records: Iterable[ActivityLogRecord]) -> None:
        self.session.add_all(list(records))

    def search(self, query: ActivityQuery) -> ActivityPage:
        filters = _activity_filters(query)
        count_stmt = select(func.count()).select_from(update_log_table).where(*filters)
        total = self.session.scalar(count_stmt) or 0
        stmt = (
            select(ActivityLogRecord)
            .where(*filters)
            .order_by(*_ACTIVITY_ORDERING[query.sort])
            .limit(query.page_size)
            .offset(query.offset)
        )
        return ActivityPage(
            items=tuple(self.session.scalars(stmt)),
            total=total,
            page=query.page,
            page_size=query.page_size,
        )


class SqlAlchemySettingsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> str | None:
        stmt = select(settings_table.c.value).where(settings_table.c.key == key)
        return cast("str | None", self.session.execute(stmt).scalar_one_or_none())

    def set(self, key: str, value: str) -> None:
        if self.get(key) is None:
            self.session.execute(insert(settings_table).values(key=key, value=value))
            return
        self.session.execute(
            update(settings_table).where(settings_table.c.key == key).values(value=value)
        )


if TYPE_CHECKING:
    from schedsync.domain.ports.persistence import (
        ActivityLog,
        CreatorDirectory,
        ScheduleRepository,
        SettingsRepository,
        StagingRepository,
    )

    _session_stub = cast("Session", object())
    _creator_check: CreatorDirectory = SqlAlchemyCreatorDirectory(_session_stub)
    _schedule_check: ScheduleRepository = SqlAlchemyScheduleRepository(_session_stub)
    _staging_check: StagingRepository = SqlAlchemyStagingRepository(_session_stub)
    _log_check: ActivityLog = SqlAlchemyActivityLog(_session_stub)
    _settings_check: SettingsRepository = SqlAlchemySettingsRepository(_session_stub)
