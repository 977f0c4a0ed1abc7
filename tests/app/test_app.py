from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from schedsync import app
from schedsync.domain.activity import ActivityQuery
from schedsync.domain.errors import ValidationError
from schedsync.domain.model import Actor, LogAction
from tests.helpers.schedule import FakeVideoSource, fixed_clock, kst, make_video

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from schedsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyScheduleUnitOfWork

    UowFactory = Callable[[], SqlAlchemyScheduleUnitOfWork]

DAY = date(2026, 2, 13)


def test_creators_can_be_added_and_listed(sqlite_unit_of_work: UowFactory) -> None:
    created = app.add_creator(
        name=" Alice ",
        channel_id=" ch-a ",
        unit_of_work_factory=sqlite_unit_of_work,
    )

    creators = app.list_creators(unit_of_work_factory=sqlite_unit_of_work)

    assert created.id is not None
    assert [(c.name, c.external_channel_id) for c in creators] == [("Alice", "ch-a")]


def test_blank_creator_name_is_rejected(sqlite_unit_of_work: UowFactory) -> None:
    with pytest.raises(ValidationError):
        app.add_creator(name="  ", unit_of_work_factory=sqlite_unit_of_work)


def test_settings_update_merges_with_stored_values(sqlite_unit_of_work: UowFactory) -> None:
    app.update_auto_update_settings(enabled=True, unit_of_work_factory=sqlite_unit_of_work)
    app.update_auto_update_settings(range_days=5, unit_of_work_factory=sqlite_unit_of_work)

    settings = app.load_auto_update_settings(unit_of_work_factory=sqlite_unit_of_work)

    assert settings.enabled is True
    assert settings.interval_hours == 2
    assert settings.range_days == 5


def test_scan_and_decide_through_app(sqlite_unit_of_work: UowFactory) -> None:
    app.add_creator(name="Alice", channel_id="ch-a", unit_of_work_factory=sqlite_unit_of_work)
    source = FakeVideoSource(
        {
            "ch-a": [
                make_video("v1", started_at=kst(DAY, 20)),
                make_video("v2", started_at=kst(DAY, 12)),
            ]
        }
    )
    engine = app.build_engine(
        source=source,
        unit_of_work_factory=sqlite_unit_of_work,
        clock=fixed_clock(),
    )
    operator = Actor(actor_id="u-1", name="Operator")

    result = app.scan(range_days=1, actor=operator, engine=engine)
    pending = app.list_pending(unit_of_work_factory=sqlite_unit_of_work)
    approved = app.approve(
        [str(pending[0].id)],
        actor=operator,
        unit_of_work_factory=sqlite_unit_of_work,
    )
    rejected = app.reject(
        None,
        reject_all=True,
        actor=operator,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert result.proposals_created == 2
    assert len(pending) == 2
    assert approved.success_count == 1
    assert rejected.success_count == 1
    assert app.list_pending(unit_of_work_factory=sqlite_unit_of_work) == []
    settings = app.load_auto_update_settings(unit_of_work_factory=sqlite_unit_of_work)
    assert settings.last_run is not None


def test_tick_is_a_no_op_when_disabled(sqlite_unit_of_work: UowFactory) -> None:
    source = FakeVideoSource()
    engine = app.build_engine(
        source=source,
        unit_of_work_factory=sqlite_unit_of_work,
        clock=fixed_clock(),
    )

    assert app.tick(engine=engine) is None
    assert source.calls == []


def test_engine_uses_configured_offset(
    sqlite_unit_of_work: UowFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SCHEDSYNC_TZ_OFFSET_HOURS", "0")
    monkeypatch.setenv("SCHEDSYNC_FETCH_CONCURRENCY", "3")

    engine = app.build_engine(source=FakeVideoSource(), unit_of_work_factory=sqlite_unit_of_work)

    assert engine.config.fetch_concurrency == 3
    assert engine.clock.now().utcoffset() is not None
    assert engine.clock.now().utcoffset().total_seconds() == 0  # type: ignore[union-attr]


def test_logs_attribute_operator(
    sqlite_unit_of_work: UowFactory,
    sqlite_engine: Engine,
) -> None:
    alice = app.add_creator(
        name="Alice",
        channel_id="ch-a",
        unit_of_work_factory=sqlite_unit_of_work,
    )
    engine = app.build_engine(
        source=FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20))]}),
        unit_of_work_factory=sqlite_unit_of_work,
        clock=fixed_clock(),
    )
    app.scan(engine=engine)

    result = app.approve(
        None,
        approve_all=True,
        actor=Actor(actor_id="u-9", name="Nine"),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert result.success_count == 1
    with sqlite_unit_of_work() as uow:
        entries = uow.repositories.schedules.list_for_day(alice.id or 0, DAY)
    assert len(entries) == 1
    with sqlite_engine.connect() as connection:
        rows = connection.exec_driver_sql(
            "SELECT action, actor_id, actor_name FROM update_logs ORDER BY id"
        ).all()
    assert [tuple(row) for row in rows] == [
        ("collected", None, "system"),
        ("approved", "u-9", "Nine"),
    ]


def test_list_activity_surfaces_failures(sqlite_unit_of_work: UowFactory) -> None:
    app.add_creator(name="Alice", channel_id="ch-a", unit_of_work_factory=sqlite_unit_of_work)
    engine = app.build_engine(
        source=FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20))]}),
        unit_of_work_factory=sqlite_unit_of_work,
        clock=fixed_clock(),
    )
    app.scan(engine=engine)
    app.reject(None, reject_all=True, unit_of_work_factory=sqlite_unit_of_work)

    everything = app.list_activity(unit_of_work_factory=sqlite_unit_of_work)
    rejected = app.list_activity(
        ActivityQuery(action=LogAction.REJECTED),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert [record.action for record in everything.items] == [
        LogAction.REJECTED,
        LogAction.COLLECTED,
    ]
    assert rejected.total == 1
    assert rejected.items[0].creator_name == "Alice"
