from __future__ import annotations

from datetime import date, time

import pytest

from schedsync.config.reconciliation import ReconciliationConfig
from schedsync.domain.errors import PersistenceError
from schedsync.domain.model import Actor, LogAction, ProposalAction, ScheduleStatus
from schedsync.domain.reconciliation import ReconciliationEngine
from tests.helpers.schedule import (
    FakeVideoSource,
    InMemoryStore,
    fixed_clock,
    kst,
    make_video,
    uow_factory,
)

DAY = date(2026, 2, 13)


def _engine(
    store: InMemoryStore,
    source: FakeVideoSource,
    *,
    config: ReconciliationConfig | None = None,
) -> ReconciliationEngine:
    return ReconciliationEngine(
        source=source,
        unit_of_work_factory=uow_factory(store),
        clock=fixed_clock(),
        config=config or ReconciliationConfig(),
    )


def test_stages_create_when_no_entry_matches() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    source = FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    result = _engine(store, source).run(3)

    assert result.checked == 1
    assert result.proposals_created == 1
    (proposal,) = store.proposals.values()
    assert proposal.action is ProposalAction.CREATE
    assert proposal.creator_id == alice.id
    assert proposal.creator_name == "Alice"
    assert proposal.date == DAY
    assert proposal.start_time == time(20, 0)
    assert proposal.title == "Evening stream"
    assert proposal.status is ScheduleStatus.LIVE
    assert proposal.fingerprint == "chzzk:v1"
    (detail,) = result.details
    assert detail.action is ProposalAction.CREATE
    assert detail.entry_id is None
    (collected,) = store.logs_with(LogAction.COLLECTED)
    assert collected.actor_name == "system"
    assert collected.actor_id is None
    assert collected.creator_id == alice.id


def test_stages_update_for_matching_entry_that_is_not_live() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    entry = store.add_entry(alice, DAY, time(20, 20), title="tbd", status=ScheduleStatus.UNDECIDED)
    source = FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    result = _engine(store, source).run()

    (proposal,) = store.proposals.values()
    assert proposal.action is ProposalAction.UPDATE
    assert proposal.target_entry_id == entry.id
    assert proposal.previous_status is ScheduleStatus.UNDECIDED
    assert proposal.previous_title == "tbd"
    assert result.details[0].entry_id == entry.id
    assert result.details[0].previous_status is ScheduleStatus.UNDECIDED


def test_stages_update_for_live_entry_with_blank_title() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    store.add_entry(alice, DAY, time(19, 30), title="   ")
    source = FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    _engine(store, source).run()

    (proposal,) = store.proposals.values()
    assert proposal.action is ProposalAction.UPDATE


def test_confirmed_live_entry_needs_no_action() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    store.add_entry(alice, DAY, time(20, 25), title="Evening stream")
    source = FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    result = _engine(store, source).run()

    assert result.checked == 1
    assert result.proposals_created == 0
    assert store.proposals == {}
    assert store.logs == []


def test_entry_outside_tolerance_does_not_match() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    store.add_entry(alice, DAY, time(20, 31), title="Late stream")
    source = FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    _engine(store, source).run()

    (proposal,) = store.proposals.values()
    assert proposal.action is ProposalAction.CREATE


def test_second_run_is_idempotent() -> None:
    store = InMemoryStore()
    store.add_creator("Alice", "ch-a")
    source = FakeVideoSource(
        {
            "ch-a": [
                make_video("v1", started_at=kst(DAY, 20, 0)),
                make_video("v2", started_at=kst(date(2026, 2, 12), 21, 0)),
            ]
        }
    )
    engine = _engine(store, source)

    first = engine.run()
    second = engine.run()

    assert first.proposals_created == 2
    assert second.proposals_created == 0
    assert second.checked == 0
    assert len(store.proposals) == 2
    assert len(store.logs_with(LogAction.COLLECTED)) == 2


def test_same_slot_is_staged_once_even_for_distinct_videos() -> None:
    store = InMemoryStore()
    store.add_creator("Alice", "ch-a")
    source = FakeVideoSource(
        {
            "ch-a": [
                make_video("v1", started_at=kst(DAY, 20, 0)),
                make_video("v2", started_at=kst(DAY, 20, 0), duration_seconds=3600),
            ]
        }
    )

    result = _engine(store, source).run()

    assert result.checked == 2
    assert result.proposals_created == 1
    assert len(store.proposals) == 1


def test_videos_outside_window_are_ignored() -> None:
    store = InMemoryStore()
    store.add_creator("Alice", "ch-a")
    source = FakeVideoSource(
        {
            "ch-a": [
                make_video("old", started_at=kst(date(2026, 2, 10), 20, 0)),
                make_video("edge", started_at=kst(date(2026, 2, 11), 0, 5)),
            ]
        }
    )

    result = _engine(store, source).run(3)

    assert result.checked == 1
    assert [p.fingerprint for p in store.proposals.values()] == ["chzzk:edge"]


def test_untrackable_and_archived_creators_are_skipped_silently() -> None:
    store = InMemoryStore()
    store.add_creator("No channel")
    store.add_creator("Blank channel", "  ")
    store.add_creator("Archived", "ch-x", archived=True)
    source = FakeVideoSource({"ch-x": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    result = _engine(store, source).run()

    assert source.calls == []
    assert result.failed_creator_ids == ()
    assert result.proposals_created == 0


def test_fetch_failure_is_isolated_per_creator() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    bob = store.add_creator("Bob", "ch-b")
    source = FakeVideoSource(
        {"ch-b": [make_video("v1", started_at=kst(DAY, 20, 0))]},
        failing=["ch-a"],
    )

    result = _engine(store, source).run()

    assert result.failed_creator_ids == (alice.id,)
    assert result.proposals_created == 1
    (proposal,) = store.proposals.values()
    assert proposal.creator_id == bob.id


def test_only_the_most_recent_page_is_considered() -> None:
    store = InMemoryStore()
    store.add_creator("Alice", "ch-a")
    videos = [make_video(f"v{i}", started_at=kst(DAY, i, 0)) for i in range(20)]
    source = FakeVideoSource({"ch-a": videos})

    result = _engine(store, source).run()

    assert source.calls == [("ch-a", 0, 15)]
    assert result.proposals_created == 15


def test_results_are_persisted_in_chunks() -> None:
    store = InMemoryStore()
    videos: dict[str, list] = {}
    for creator_index in range(8):
        channel = f"ch-{creator_index}"
        store.add_creator(f"Creator {creator_index}", channel)
        videos[channel] = [
            make_video(f"{channel}-{hour}", started_at=kst(DAY, hour, creator_index))
            for hour in range(15)
        ]
    source = FakeVideoSource(videos)

    result = _engine(store, source).run()

    assert result.proposals_created == 120
    assert store.staging_writes == 3
    assert len(store.proposals) == 120
    assert len(store.logs_with(LogAction.COLLECTED)) == 120


def test_chunk_size_is_configurable() -> None:
    store = InMemoryStore()
    store.add_creator("Alice", "ch-a")
    videos = [make_video(f"v{i}", started_at=kst(DAY, i, 0)) for i in range(5)]
    source = FakeVideoSource({"ch-a": videos})

    _engine(store, source, config=ReconciliationConfig(chunk_size=2)).run()

    assert store.staging_writes == 3


def test_store_failure_records_auto_failed_and_raises() -> None:
    store = InMemoryStore(fail_staging_after=1)
    videos: dict[str, list] = {}
    for creator_index in range(4):
        channel = f"ch-{creator_index}"
        store.add_creator(f"Creator {creator_index}", channel)
        videos[channel] = [
            make_video(f"{channel}-{hour}", started_at=kst(DAY, hour, creator_index))
            for hour in range(15)
        ]

    with pytest.raises(PersistenceError):
        _engine(store, FakeVideoSource(videos)).run()

    # the first chunk was committed and stays
    assert len(store.proposals) == 50
    (failure,) = store.logs_with(LogAction.AUTO_FAILED)
    assert failure.actor_name == "system"
    assert failure.entry_date == date(2026, 2, 14)


def test_no_active_creators_returns_empty_result() -> None:
    store = InMemoryStore()
    source = FakeVideoSource()

    result = _engine(store, source).run()

    assert result.checked == 0
    assert result.proposals_created == 0
    assert result.details == ()


def test_unexpected_fetch_error_is_isolated_per_creator() -> None:
    store = InMemoryStore()
    alice = store.add_creator("Alice", "ch-a")
    bob = store.add_creator("Bob", "ch-b")
    source = FakeVideoSource(
        {"ch-b": [make_video("v1", started_at=kst(DAY, 20, 0))]},
        errors={"ch-a": RuntimeError("unexpected decode failure")},
    )

    result = _engine(store, source).run()

    assert result.failed_creator_ids == (alice.id,)
    assert result.proposals_created == 1
    (proposal,) = store.proposals.values()
    assert proposal.creator_id == bob.id
    assert store.logs_with(LogAction.AUTO_FAILED) == []


def test_store_failure_is_credited_to_the_given_actor() -> None:
    store = InMemoryStore(fail_staging_after=0)
    store.add_creator("Alice", "ch-a")
    source = FakeVideoSource({"ch-a": [make_video("v1", started_at=kst(DAY, 20, 0))]})

    with pytest.raises(PersistenceError):
        _engine(store, source).run(actor=Actor(actor_id="u-9", name="Operator"))

    (failure,) = store.logs_with(LogAction.AUTO_FAILED)
    assert failure.actor_id == "u-9"
    assert failure.actor_name == "Operator"
