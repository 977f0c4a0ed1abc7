"""Read-through caching for video listings."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from schedsync.domain.model import Video
    from schedsync.domain.ports import VideoCache, VideoCacheKey, VideoSource

log = getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass(slots=True)
class InMemoryVideoCache:
    """Process-local cache with a fixed time-to-live per entry."""

    ttl_seconds: float = DEFAULT_TTL_SECONDS
    clock: Callable[[], float] = time.monotonic
    _entries: dict[VideoCacheKey, tuple[float, list[Video]]] = field(
        default_factory=dict,
        init=False,
    )

    def get(self, key: VideoCacheKey) -> list[Video] | None:
        if not self.is_fresh(key):
            self._entries.pop(key, None)
            return None
        _, videos = self._entries[key]
        return list(videos)

    def set(self, key: VideoCacheKey, videos: list[Video]) -> None:
        self._entries[key] = (self.clock(), list(videos))

    def is_fresh(self, key: VideoCacheKey) -> bool:
        cached = self._entries.get(key)
        if cached is None:
            return False
        stored_at, _ = cached
        return self.clock() - stored_at < self.ttl_seconds


class NullVideoCache:
    """Cache that never stores anything."""

    def get(self, key: VideoCacheKey) -> list[Video] | None:
        _ = key
        return None

    def set(self, key: VideoCacheKey, videos: list[Video]) -> None:
        _ = (key, videos)

    def is_fresh(self, key: VideoCacheKey) -> bool:
        _ = key
        return False


@dataclass(slots=True)
class CachedVideoSource:
    """Serve fresh listings from ``cache`` and fall back to ``source``.

    Failed fetches are never cached.
    """

    source: VideoSource
    cache: VideoCache = field(default_factory=InMemoryVideoCache)

    async def list_recent(
        self,
        channel_id: str,
        *,
        page: int = 0,
        size: int = 15,
    ) -> list[Video]:
        key: VideoCacheKey = (channel_id, page, size)
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("Video cache hit for %s", key)
            return cached
        videos = await self.source.list_recent(channel_id, page=page, size=size)
        self.cache.set(key, videos)
        return videos


if TYPE_CHECKING:
    _cache_check: VideoCache = InMemoryVideoCache()
    _null_check: VideoCache = NullVideoCache()
