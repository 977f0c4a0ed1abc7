"""HTTP video source backed by the Chzzk channel video listing."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter

from schedsync.adapters.http_resilience import ResilientClient
from schedsync.config.chzzk import ChzzkConfig, get_chzzk_config
from schedsync.config.http_resilience import RateLimit, ResilienceConfig
from schedsync.domain.errors import TransientFetchError

from .schema import VideoListResponse
from .translator import parse_video_list

if TYPE_CHECKING:
    from schedsync.domain.model import Video
    from schedsync.domain.ports import VideoSource

log = getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 10.0

ClientFactory = Callable[[ResilienceConfig, AsyncLimiter | None], ResilientClient]


def _default_resilience_config(config: ChzzkConfig) -> ResilienceConfig:
    return ResilienceConfig(
        name="chzzk",
        base_url=config.base_url,
        timeout_seconds=_DEFAULT_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=config.requests_per_second, per_seconds=1.0),
        default_headers={"Accept": "application/json"},
    )


def _default_client_factory(
    config: ResilienceConfig,
    limiter: AsyncLimiter | None,
) -> ResilientClient:
    return ResilientClient(config, limiter=limiter)


class ChzzkAPIError(RuntimeError):
    """Raised when Chzzk answers with an application-level error code."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class ChzzkVideoSource:
    """List a channel's most recent videos, newest first.

    Every call opens a short-lived client; the rate limiter is shared across
    calls so concurrent listings stay within one request budget.
    """

    config: ChzzkConfig = field(default_factory=get_chzzk_config)
    resilience: ResilienceConfig | None = None
    client_factory: ClientFactory = field(default=_default_client_factory)
    _resolved: ResilienceConfig = field(init=False)
    _limiter: AsyncLimiter | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._resolved = self.resilience or _default_resilience_config(self.config)
        ratelimit = self._resolved.ratelimit
        if ratelimit is not None:
            self._limiter = AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)

    @property
    def resilience_config(self) -> ResilienceConfig:
        return self._resolved

    async def list_recent(
        self,
        channel_id: str,
        *,
        page: int = 0,
        size: int = 15,
    ) -> list[Video]:
        params = httpx.QueryParams(
            {
                "sortType": "LATEST",
                "pagingType": "PAGE",
                "page": page,
                "size": size,
            }
        )
        try:
            async with self.client_factory(self._resolved, self._limiter) as client:
                response = await client.get(
                    f"/service/v1/channels/{channel_id}/videos",
                    params=params,
                )
                response.raise_for_status()
                payload = VideoListResponse.model_validate(response.json())
            if payload.code != httpx.codes.OK:
                raise ChzzkAPIError(payload.message or "Chzzk API error", code=payload.code)
        # pydantic.ValidationError and JSON decoding errors are both ValueErrors
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, ChzzkAPIError) as exc:
            log.warning("Failed to fetch Chzzk videos for %s: %s", channel_id, exc)
            raise TransientFetchError(
                f"Could not list videos for channel {channel_id}",
                channel_id=channel_id,
            ) from exc

        return parse_video_list(payload)


if TYPE_CHECKING:
    _source_check: VideoSource = ChzzkVideoSource()
