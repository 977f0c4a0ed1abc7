"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from schedsync.adapters.chzzk import ChzzkVideoSource
from schedsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyScheduleUnitOfWork,
    is_started,
    startup,
)
from schedsync.adapters.video_cache import CachedVideoSource, InMemoryVideoCache
from schedsync.config import get_approval_config, get_chzzk_config, get_reconciliation_config
from schedsync.domain.activity import ActivityQuery
from schedsync.domain.approval import ApprovalProcessor
from schedsync.domain.auto_update import AutoUpdateSettings, run_if_due, run_now
from schedsync.domain.broadcast_time import TargetClock
from schedsync.domain.errors import ValidationError
from schedsync.domain.model import Actor, Creator
from schedsync.domain.ports.unit_of_work import ScheduleUnitOfWork
from schedsync.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from schedsync.domain.activity import ActivityPage
    from schedsync.domain.approval import BulkResult
    from schedsync.domain.model import StagingProposal
    from schedsync.domain.ports import VideoSource
    from schedsync.domain.reconciliation import ReconciliationResult

UnitOfWorkFactory = Callable[[], ScheduleUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyScheduleUnitOfWork


def build_video_source() -> VideoSource:
    """Chzzk listings behind a short-lived in-process cache."""

    chzzk = get_chzzk_config()
    return CachedVideoSource(
        source=ChzzkVideoSource(config=chzzk),
        cache=InMemoryVideoCache(ttl_seconds=chzzk.cache_ttl_seconds),
    )


def build_engine(
    *,
    source: VideoSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: TargetClock | None = None,
) -> ReconciliationEngine:
    config = get_reconciliation_config()
    return ReconciliationEngine(
        source=source or build_video_source(),
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        clock=clock or TargetClock.with_offset(config.tz_offset_hours),
        config=config,
    )


def build_processor(
    *,
    actor: Actor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ApprovalProcessor:
    return ApprovalProcessor(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        actor=actor or Actor.system(),
        config=get_approval_config(),
    )


def scan(
    *,
    range_days: int | None = None,
    actor: Actor | None = None,
    engine: ReconciliationEngine | None = None,
) -> ReconciliationResult:
    """Run reconciliation now, ignoring the enabled flag and interval."""

    effective_engine = engine or build_engine()
    log.info("Starting manual scan: range_days=%s", range_days)
    result = run_now(effective_engine, actor=actor, range_days=range_days)
    log.info(
        "Finished manual scan: checked=%s, staged=%s, failed_creators=%s",
        result.checked,
        result.proposals_created,
        list(result.failed_creator_ids),
    )
    return result


def tick(
    *,
    actor: Actor | None = None,
    engine: ReconciliationEngine | None = None,
) -> ReconciliationResult | None:
    """Run reconciliation only when the persisted trigger settings say it is due."""

    return run_if_due(engine or build_engine(), actor=actor)


def list_pending(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[StagingProposal]:
    return build_processor(unit_of_work_factory=unit_of_work_factory).list_pending()


def approve(
    proposal_ids: Sequence[int | str] | None,
    *,
    approve_all: bool = False,
    actor: Actor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> BulkResult:
    processor = build_processor(actor=actor, unit_of_work_factory=unit_of_work_factory)
    if approve_all:
        return processor.approve_all()
    return processor.approve_many(proposal_ids)


def reject(
    proposal_ids: Sequence[int | str] | None,
    *,
    reject_all: bool = False,
    actor: Actor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> BulkResult:
    processor = build_processor(actor=actor, unit_of_work_factory=unit_of_work_factory)
    if reject_all:
        return processor.reject_all()
    return processor.reject_many(proposal_ids)


def load_auto_update_settings(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> AutoUpdateSettings:
    factory = unit_of_work_factory or _default_unit_of_work_factory()
    with factory() as uow:
        return AutoUpdateSettings.load(uow.repositories.settings)


def update_auto_update_settings(
    *,
    enabled: bool | None = None,
    interval_hours: int | None = None,
    range_days: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> AutoUpdateSettings:
    factory = unit_of_work_factory or _default_unit_of_work_factory()
    with factory() as uow:
        settings = AutoUpdateSettings.load(uow.repositories.settings).updated(
            enabled=enabled,
            interval_hours=interval_hours,
            range_days=range_days,
        )
        settings.save(uow.repositories.settings)
        uow.commit()
    log.info(
        "Saved auto update settings: enabled=%s, interval_hours=%s, range_days=%s",
        settings.enabled,
        settings.interval_hours,
        settings.range_days,
    )
    return settings


def add_creator(
    *,
    name: str,
    channel_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Creator:
    if not name.strip():
        raise ValidationError("Creator name must not be empty")
    creator = Creator(
        name=name.strip(),
        external_channel_id=channel_id.strip() if channel_id else None,
    )
    factory = unit_of_work_factory or _default_unit_of_work_factory()
    with factory() as uow:
        uow.repositories.creators.add(creator)
        uow.commit()
    log.info("Added creator %s (%s)", creator.id, creator.name)
    return creator


def list_creators(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Creator]:
    factory = unit_of_work_factory or _default_unit_of_work_factory()
    with factory() as uow:
        return list(uow.repositories.creators.list_all())


def list_activity(
    query: ActivityQuery | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ActivityPage:
    """Browse the activity log; defaults to the newest 50 rows."""

    factory = unit_of_work_factory or _default_unit_of_work_factory()
    with factory() as uow:
        return uow.repositories.activity_log.search(query or ActivityQuery())
