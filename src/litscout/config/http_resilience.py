"""Retry, rate-limit and cache settings for the literature API clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

RATE_LIMITED_STATUS = 429


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retry only rate-limit responses, doubling the wait between attempts.

    ``total`` counts retries, so the default allows three attempts per call. Server
    errors surface immediately and are recorded as fetch failures by the harvest.
    """

    total: int = 2
    backoff_factor: float = 1.0
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({RATE_LIMITED_STATUS})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = ()


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """In-memory response cache living as long as one client.

    A harvest repeating a query against the same API is answered from here.
    """

    enabled: bool = True
    default_ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None
