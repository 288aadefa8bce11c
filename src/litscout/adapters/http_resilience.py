"""Shared async HTTP client for the literature APIs."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from litscout.config.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import QueryParamTypes, TimeoutTypes

__all__ = [
    "CacheConfig",
    "LiteratureAPIError",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
]

log = getLogger(__name__)

SAFE_METHODS = ("GET", "HEAD")


class LiteratureAPIError(RuntimeError):
    """A literature API answered with an error status or a body that is not JSON."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=SAFE_METHODS,
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None


class AsyncClientOptions(TypedDict, total=False):
    timeout: TimeoutTypes
    headers: dict[str, str]
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """``httpx.AsyncClient`` with retry, rate limiting and a per-client response cache.

    Requests are addressed by path relative to ``config.base_url``; every call made
    through one instance shares its rate limiter.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=build_retry(config.retry)),
        }
        if config.default_headers:
            client_kwargs["headers"] = dict(config.default_headers)

        self._client: httpx.AsyncClient
        storage = _build_cache_storage(config.cache)
        if storage is not None:
            self._client = AsyncCacheClient(**client_kwargs, storage=storage)
        else:
            self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        if self.config.base_url is None:
            return path
        return self.config.base_url.rstrip("/") + "/" + path.lstrip("/")

    async def get(self, path: str, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        url = self.url_for(path)

        async def do_request() -> httpx.Response:
            return await self._client.get(url, **kwargs)

        return await self._send(do_request)

    async def get_json(
        self,
        path: str,
        *,
        params: QueryParamTypes | None = None,
        error: type[LiteratureAPIError] = LiteratureAPIError,
    ) -> object:
        """GET ``path`` and decode the JSON body, raising ``error`` for error statuses."""

        response = await self.get(path, params=params)
        if response.is_error:
            log.error("%s API error %d for %s", self.config.name, response.status_code, path)
            raise error(
                f"{self.config.name} API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise error(f"{self.config.name} returned invalid JSON") from exc

    async def _send(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        if self._limiter is None:
            return await func()
        async with self._limiter:
            return await func()


def _build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    if config is None or not config.enabled:
        return None
    return AsyncSqliteStorage(database_path=":memory:", default_ttl=config.default_ttl_seconds)
