"""Public interface for the Chzzk adapter."""

from __future__ import annotations

from .client import ChzzkAPIError, ChzzkVideoSource
from .schema import VideoListResponse, VideoPage, VideoPayload
from .translator import parse_video, parse_video_list

__all__ = [
    "ChzzkAPIError",
    "ChzzkVideoSource",
    "VideoListResponse",
    "VideoPage",
    "VideoPayload",
    "parse_video",
    "parse_video_list",
]
