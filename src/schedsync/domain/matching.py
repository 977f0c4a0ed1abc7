"""Tolerance matching and idempotency indices shared by scan and approval."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from schedsync.config.reconciliation import DEFAULT_TOLERANCE_MINUTES

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, time

    from schedsync.domain.model import ScheduleEntry, StagingKey, StagingProposal


def minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


def within_tolerance(
    first: time,
    second: time,
    *,
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
) -> bool:
    """Return whether two start times denote the same broadcast occurrence."""

    return abs(minutes_of(first) - minutes_of(second)) <= tolerance_minutes


def find_matching_entry(
    entries: Iterable[ScheduleEntry],
    start_time: time | None,
    *,
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
) -> ScheduleEntry | None:
    """Return the first entry whose start time falls inside the tolerance window.

    Entries without a start time never match, and neither does a missing
    ``start_time``.
    """

    if start_time is None:
        return None
    for entry in entries:
        if entry.start_time is None:
            continue
        if within_tolerance(entry.start_time, start_time, tolerance_minutes=tolerance_minutes):
            return entry
    return None


@dataclass(slots=True)
class StagingIndex:
    """Lookup of everything already staged, keyed by fingerprint and by slot."""

    fingerprints: set[str] = field(default_factory=set[str])
    keys: set[StagingKey] = field(default_factory=set["StagingKey"])

    @classmethod
    def build(cls, proposals: Iterable[StagingProposal]) -> StagingIndex:
        index = cls()
        for proposal in proposals:
            index.add(proposal)
        return index

    def has_fingerprint(self, fingerprint: str) -> bool:
        return fingerprint in self.fingerprints

    def has_key(self, creator_id: int, day: date, start_time: time | None) -> bool:
        return (creator_id, day, start_time) in self.keys

    def add(self, proposal: StagingProposal) -> None:
        if proposal.fingerprint:
            self.fingerprints.add(proposal.fingerprint)
        self.keys.add(proposal.key)


def group_by_creator_day(
    entries: Iterable[ScheduleEntry],
) -> dict[tuple[int, date], list[ScheduleEntry]]:
    grouped: dict[tuple[int, date], list[ScheduleEntry]] = {}
    for entry in entries:
        grouped.setdefault((entry.creator_id, entry.date), []).append(entry)
    return grouped
