"""Read model for a published video returned by a video source."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True, slots=True)
class Video:
    external_video_id: str
    title: str
    published_at_ms: int
    duration_seconds: int

    @property
    def published_at(self) -> datetime:
        return datetime.fromtimestamp(self.published_at_ms / 1000, tz=UTC)

    @property
    def started_at(self) -> datetime:
        """Actual stream start: the VOD publish instant minus its duration."""
        return self.published_at - timedelta(seconds=self.duration_seconds)

    def fingerprint(self, source: str) -> str:
        return f"{source}:{self.external_video_id}"
