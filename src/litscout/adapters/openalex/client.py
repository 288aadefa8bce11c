"""HTTP client for the OpenAlex works API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from litscout.adapters.http_resilience import LiteratureAPIError, ResilientClient
from litscout.config.literature import OpenAlexConfig, get_openalex_config

from .schema import WorksResponse
from .translator import parse_work

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from litscout.config.http_resilience import ResilienceConfig
    from litscout.domain.model import SearchResult
    from litscout.domain.ports import SearchRequest

log = getLogger(__name__)

WORK_FIELDS = "id,title,authorships,publication_year,doi,ids,abstract_inverted_index,cited_by_count"


class OpenAlexAPIError(LiteratureAPIError):
    """Raised when OpenAlex answers with an error status or an unexpected payload."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def publication_year_filter(year_min: int | None, year_max: int | None) -> str | None:
    clauses: list[str] = []
    if year_min is not None:
        clauses.append(f"publication_year:>{year_min - 1}")
    if year_max is not None:
        clauses.append(f"publication_year:<{year_max + 1}")
    return ",".join(clauses) or None


@dataclass(slots=True)
class OpenAlexClient:
    config: OpenAlexConfig = field(default_factory=get_openalex_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _http: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> OpenAlexClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _client(self) -> ResilientClient:
        if self._http is None:
            self._http = self.client_factory(self.config.resilience)
        return self._http

    async def search(self, request: SearchRequest) -> list[SearchResult]:
        params: dict[str, str | int] = {
            "search": request.query,
            "per_page": request.limit,
            "select": WORK_FIELDS,
        }
        year_filter = publication_year_filter(request.year_min, request.year_max)
        if year_filter is not None:
            params["filter"] = year_filter
        if self.config.mailto:
            params["mailto"] = self.config.mailto

        payload = await self._client().get_json(
            "works", params=httpx.QueryParams(params), error=OpenAlexAPIError
        )
        try:
            works = WorksResponse.model_validate(payload)
        except ValidationError as exc:
            raise OpenAlexAPIError("Unexpected OpenAlex works payload") from exc
        log.debug("OpenAlex returned %d works for %r", len(works.results or []), request.query)
        return [parse_work(work) for work in works.results or []]
