"""Persisted trigger settings and the "run reconciliation now" use cases."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from schedsync.config.reconciliation import DEFAULT_RANGE_DAYS
from schedsync.domain.errors import PersistenceError, ValidationError
from schedsync.domain.model import ActivityLogRecord, Actor

if TYPE_CHECKING:
    from schedsync.domain.ports import SettingsRepository
    from schedsync.domain.reconciliation import ReconciliationEngine, ReconciliationResult

log = getLogger(__name__)

ENABLED_KEY: Final[str] = "auto_update_enabled"
INTERVAL_HOURS_KEY: Final[str] = "auto_update_interval_hours"
RANGE_DAYS_KEY: Final[str] = "auto_update_range_days"
LAST_RUN_KEY: Final[str] = "auto_update_last_run"

DEFAULT_INTERVAL_HOURS: Final[int] = 2


def _parse_int(raw: str | None, *, key: str, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        log.warning("Ignoring invalid %s setting %r; using %s", key, raw, default)
        return default


def _parse_last_run(raw: str | None) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    try:
        return datetime.fromtimestamp(int(raw.strip()) / 1000, tz=UTC)
    except ValueError:
        log.warning("Ignoring invalid %s setting %r", LAST_RUN_KEY, raw)
        return None


@dataclass(frozen=True, slots=True)
class AutoUpdateSettings:
    """Gate for the time-based trigger.

    ``last_run`` is only ever written by the trigger itself, never by ``save``.
    """

    enabled: bool = False
    interval_hours: int = DEFAULT_INTERVAL_HOURS
    range_days: int = DEFAULT_RANGE_DAYS
    last_run: datetime | None = None

    def __post_init__(self) -> None:
        if self.interval_hours < 1:
            raise ValidationError("interval_hours must be at least 1")
        if self.range_days < 0:
            raise ValidationError("range_days must be non-negative")

    @classmethod
    def load(cls, repository: SettingsRepository) -> AutoUpdateSettings:
        enabled_raw = repository.get(ENABLED_KEY)
        interval = _parse_int(
            repository.get(INTERVAL_HOURS_KEY),
            key=INTERVAL_HOURS_KEY,
            default=DEFAULT_INTERVAL_HOURS,
        )
        range_days = _parse_int(
            repository.get(RANGE_DAYS_KEY),
            key=RANGE_DAYS_KEY,
            default=DEFAULT_RANGE_DAYS,
        )
        return cls(
            enabled=(enabled_raw or "").strip().lower() == "true",
            interval_hours=max(interval, 1),
            range_days=max(range_days, 0),
            last_run=_parse_last_run(repository.get(LAST_RUN_KEY)),
        )

    def save(self, repository: SettingsRepository) -> None:
        repository.set(ENABLED_KEY, "true" if self.enabled else "false")
        repository.set(INTERVAL_HOURS_KEY, str(self.interval_hours))
        repository.set(RANGE_DAYS_KEY, str(self.range_days))

    def updated(
        self,
        *,
        enabled: bool | None = None,
        interval_hours: int | None = None,
        range_days: int | None = None,
    ) -> AutoUpdateSettings:
        return replace(
            self,
            enabled=self.enabled if enabled is None else enabled,
            interval_hours=self.interval_hours if interval_hours is None else interval_hours,
            range_days=self.range_days if range_days is None else range_days,
        )

    def is_due(self, now: datetime) -> bool:
        if not self.enabled:
            return False
        if self.last_run is None:
            return True
        return now - self.last_run >= timedelta(hours=self.interval_hours)


def record_last_run(repository: SettingsRepository, at: datetime) -> None:
    repository.set(LAST_RUN_KEY, str(int(at.timestamp() * 1000)))


def run_now(
    engine: ReconciliationEngine,
    *,
    actor: Actor | None = None,
    range_days: int | None = None,
) -> ReconciliationResult:
    """Run a scan immediately, regardless of the enabled flag and interval.

    Uses the persisted lookback unless ``range_days`` is given and stamps the
    last-run time on success. A failure is recorded as ``auto_failed`` before it
    propagates.
    """

    acting = actor or Actor.system()
    with engine.unit_of_work_factory() as uow:
        settings = AutoUpdateSettings.load(uow.repositories.settings)
    days = settings.range_days if range_days is None else range_days

    try:
        result = engine.run(days, actor=acting)
    except PersistenceError:
        raise
    except Exception:
        log.exception("Reconciliation run failed")
        _record_failure(engine, acting)
        raise

    with engine.unit_of_work_factory() as uow:
        record_last_run(uow.repositories.settings, engine.clock.now())
        uow.commit()
    return result


def run_if_due(
    engine: ReconciliationEngine,
    *,
    actor: Actor | None = None,
) -> ReconciliationResult | None:
    """Time-based trigger: run only when enabled and the interval has elapsed."""

    with engine.unit_of_work_factory() as uow:
        settings = AutoUpdateSettings.load(uow.repositories.settings)
    now = engine.clock.now()
    if not settings.is_due(now):
        log.info(
            "Auto update not due: enabled=%s, last_run=%s, interval_hours=%s",
            settings.enabled,
            settings.last_run,
            settings.interval_hours,
        )
        return None
    return run_now(engine, actor=actor, range_days=settings.range_days)


def _record_failure(engine: ReconciliationEngine, actor: Actor) -> None:
    record = ActivityLogRecord.failure(
        on=engine.clock.today(),
        actor=actor,
        message="manual auto update failed",
    )
    try:
        with engine.unit_of_work_factory() as uow:
            uow.repositories.activity_log.append(record)
            uow.commit()
    except Exception:
        log.exception("Could not record auto_failed entry")
