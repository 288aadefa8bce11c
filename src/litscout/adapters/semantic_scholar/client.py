"""HTTP client for the Semantic Scholar Graph API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from litscout.adapters.http_resilience import LiteratureAPIError, ResilientClient
from litscout.config.literature import SemanticScholarConfig, get_semantic_scholar_config
from litscout.domain.ports import CitationDirection

from .schema import CitationsResponse, SearchResponse
from .translator import parse_paper

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from litscout.config.http_resilience import ResilienceConfig
    from litscout.domain.model import SearchResult
    from litscout.domain.ports import SearchRequest

log = getLogger(__name__)

PAPER_FIELDS = "title,authors,year,externalIds,abstract,url,citationCount"


class SemanticScholarAPIError(LiteratureAPIError):
    """Raised when the Semantic Scholar API answers with an error or an unexpected payload."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def year_range_param(year_min: int | None, year_max: int | None) -> str | None:
    if year_min is None and year_max is None:
        return None
    return f"{year_min if year_min is not None else ''}-{year_max if year_max is not None else ''}"


@dataclass(slots=True)
class SemanticScholarClient:
    """Paper search and citation lookup.

    One underlying HTTP client is shared by every call made through this instance so
    concurrent requests go through the same rate limiter. Use it as an async context
    manager, or call :meth:`aclose` when done.
    """

    config: SemanticScholarConfig = field(default_factory=get_semantic_scholar_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _http: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> SemanticScholarClient:
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
            "query": request.query,
            "limit": request.limit,
            "offset": 0,
            "fields": PAPER_FIELDS,
        }
        year = year_range_param(request.year_min, request.year_max)
        if year is not None:
            params["year"] = year

        payload = await self._client().get_json(
            "paper/search", params=httpx.QueryParams(params), error=SemanticScholarAPIError
        )
        try:
            response = SearchResponse.model_validate(payload)
        except ValidationError as exc:
            raise SemanticScholarAPIError("Unexpected Semantic Scholar search payload") from exc
        papers = response.data or []
        log.debug("Semantic Scholar returned %d papers for %r", len(papers), request.query)
        return [parse_paper(paper) for paper in papers]

    async def citations(
        self, doi: str, direction: CitationDirection, limit: int
    ) -> list[SearchResult]:
        endpoint = "citations" if direction is CitationDirection.CITING else "references"
        params = httpx.QueryParams({"fields": PAPER_FIELDS, "limit": limit})
        payload = await self._client().get_json(
            f"paper/DOI:{doi}/{endpoint}", params=params, error=SemanticScholarAPIError
        )
        try:
            response = CitationsResponse.model_validate(payload)
        except ValidationError as exc:
            raise SemanticScholarAPIError("Unexpected Semantic Scholar citations payload") from exc

        results: list[SearchResult] = []
        for item in response.data or []:
            paper = item.citing_paper if direction is CitationDirection.CITING else item.cited_paper
            if paper is not None:
                results.append(parse_paper(paper))
        return results
