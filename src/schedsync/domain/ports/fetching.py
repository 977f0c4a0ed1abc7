"""Ports for fetching external domain data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from schedsync.domain.model import Video

type VideoCacheKey = tuple[str, int, int]


@runtime_checkable
class VideoSource(Protocol):
    """Recent-video listing for one creator channel.

    Implementations own their retry policy and raise
    ``TransientFetchError`` when a listing cannot be produced.
    """

    async def list_recent(
        self,
        channel_id: str,
        *,
        page: int = 0,
        size: int = 15,
    ) -> list[Video]: ...


@runtime_checkable
class VideoCache(Protocol):
    """Injected cache capability for video listings keyed by (channel, page, size)."""

    def get(self, key: VideoCacheKey) -> list[Video] | None: ...

    def set(self, key: VideoCacheKey, videos: list[Video]) -> None: ...

    def is_fresh(self, key: VideoCacheKey) -> bool: ...


__all__ = ["VideoCache", "VideoCacheKey", "VideoSource"]
