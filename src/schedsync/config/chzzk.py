"""Chzzk video source configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .env import int_from_env

CHZZK_BASE_URL: Final[str] = "https://api.chzzk.naver.com"
DEFAULT_CACHE_TTL_SECONDS: Final[int] = 300


@dataclass(frozen=True, slots=True)
class ChzzkConfig:
    base_url: str = CHZZK_BASE_URL
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    requests_per_second: int = 10


def get_chzzk_config() -> ChzzkConfig:
    return ChzzkConfig(
        base_url=os.getenv("CHZZK_BASE_URL") or CHZZK_BASE_URL,
        cache_ttl_seconds=int_from_env("CHZZK_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
        requests_per_second=int_from_env("CHZZK_REQUESTS_PER_SECOND", 10),
    )
