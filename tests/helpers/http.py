"""Mock-transport HTTP clients for literature API adapter tests."""

from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

import httpx

from litscout.adapters.http_resilience import ResilienceConfig, ResilientClient


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def resilience(name: str, base_url: str) -> ResilienceConfig:
    return ResilienceConfig(name=name, base_url=base_url, cache=None)
