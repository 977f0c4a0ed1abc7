from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from schedsync.domain.activity import ActivityQuery, ActivitySort
from schedsync.domain.model import ActivityLogRecord, LogAction, ScheduleStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from schedsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyScheduleUnitOfWork

    UowFactory = Callable[[], SqlAlchemyScheduleUnitOfWork]

BASE = datetime(2026, 2, 13, 12, 0, tzinfo=UTC)


def _record(
    minutes: int,
    action: LogAction,
    *,
    creator: str | None,
    day: date,
    title: str | None,
) -> ActivityLogRecord:
    return ActivityLogRecord(
        action=action,
        entry_date=day,
        actor_name="system",
        creator_name=creator,
        title=title,
        status=ScheduleStatus.LIVE if creator else None,
        created_at=BASE + timedelta(minutes=minutes),
    )


@pytest.fixture
def seeded(sqlite_unit_of_work: UowFactory) -> UowFactory:
    records = [
        _record(0, LogAction.COLLECTED, creator="Alice", day=date(2026, 2, 10), title="Morning"),
        _record(1, LogAction.APPROVED, creator="Alice", day=date(2026, 2, 10), title="Morning"),
        _record(2, LogAction.COLLECTED, creator="Bob", day=date(2026, 2, 12), title="Karaoke"),
        _record(3, LogAction.REJECTED, creator="Bob", day=date(2026, 2, 12), title="Karaoke"),
        _record(
            4,
            LogAction.AUTO_FAILED,
            creator=None,
            day=date(2026, 2, 13),
            title="manual auto update failed",
        ),
    ]
    with sqlite_unit_of_work() as uow:
        uow.repositories.activity_log.append_many(records)
        uow.commit()
    return sqlite_unit_of_work


def _search(factory: UowFactory, query: ActivityQuery) -> list[tuple[str, str | None]]:
    with factory() as uow:
        page = uow.repositories.activity_log.search(query)
    return [(str(record.action), record.creator_name) for record in page.items]


def test_default_query_is_newest_first(seeded: UowFactory) -> None:
    with seeded() as uow:
        page = uow.repositories.activity_log.search(ActivityQuery())

    assert page.total == 5
    assert [str(record.action) for record in page.items] == [
        "auto_failed",
        "rejected",
        "collected",
        "approved",
        "collected",
    ]
    assert page.total_pages == 1
    assert not page.has_next_page


def test_filters_by_action(seeded: UowFactory) -> None:
    result = _search(seeded, ActivityQuery(action=LogAction.AUTO_FAILED))

    assert result == [("auto_failed", None)]


def test_creator_filter_is_case_insensitive_substring(seeded: UowFactory) -> None:
    result = _search(seeded, ActivityQuery(creator="LIC"))

    assert result == [("approved", "Alice"), ("collected", "Alice")]


def test_text_searches_title_and_creator(seeded: UowFactory) -> None:
    assert _search(seeded, ActivityQuery(text="karaoke")) == [
        ("rejected", "Bob"),
        ("collected", "Bob"),
    ]
    assert _search(seeded, ActivityQuery(text="bob", action=LogAction.COLLECTED)) == [
        ("collected", "Bob"),
    ]


def test_schedule_date_range_is_inclusive(seeded: UowFactory) -> None:
    result = _search(
        seeded,
        ActivityQuery(date_from=date(2026, 2, 12), date_to=date(2026, 2, 13)),
    )

    assert [action for action, _ in result] == ["auto_failed", "rejected", "collected"]


def test_sort_by_schedule_date_ascending(seeded: UowFactory) -> None:
    result = _search(seeded, ActivityQuery(sort=ActivitySort.SCHEDULE_ASC))

    assert result == [
        ("collected", "Alice"),
        ("approved", "Alice"),
        ("collected", "Bob"),
        ("rejected", "Bob"),
        ("auto_failed", None),
    ]


def test_pages_with_limit_and_offset(seeded: UowFactory) -> None:
    with seeded() as uow:
        page = uow.repositories.activity_log.search(ActivityQuery(page=2, page_size=2))

    assert page.total == 5
    assert page.total_pages == 3
    assert page.has_prev_page
    assert page.has_next_page
    assert [str(record.action) for record in page.items] == ["collected", "approved"]
