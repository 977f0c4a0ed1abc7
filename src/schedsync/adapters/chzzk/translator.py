"""Translate Chzzk payloads into domain videos."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schedsync.domain.model import Video

if TYPE_CHECKING:
    from .schema import VideoListResponse, VideoPayload


def parse_video(payload: VideoPayload) -> Video:
    return Video(
        external_video_id=payload.video_id,
        title=payload.video_title.strip(),
        published_at_ms=payload.publish_date_at,
        duration_seconds=max(payload.duration, 0),
    )


def parse_video_list(response: VideoListResponse) -> list[Video]:
    """A ``null`` content block means the channel has nothing to list."""

    if response.content is None:
        return []
    return [parse_video(item) for item in response.content.data]
