"""Route search requests to the literature API named in the request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litscout.domain.model import SearchApi

from .openalex import OpenAlexClient
from .semantic_scholar import SemanticScholarClient

if TYPE_CHECKING:
    from types import TracebackType

    from litscout.domain.model import SearchResult
    from litscout.domain.ports import CitationDirection, SearchRequest


class UnsupportedSearchApiError(ValueError):
    """Raised for a search request naming an API no client exists for."""


@dataclass(slots=True)
class LiteratureSearchService:
    """Implements both search ports; citations always come from Semantic Scholar."""

    semantic_scholar: SemanticScholarClient = field(default_factory=SemanticScholarClient)
    openalex: OpenAlexClient = field(default_factory=OpenAlexClient)

    async def __aenter__(self) -> LiteratureSearchService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.semantic_scholar.aclose()
        await self.openalex.aclose()

    async def __call__(self, request: SearchRequest) -> list[SearchResult]:
        match request.api:
            case SearchApi.SEMANTIC_SCHOLAR:
                return await self.semantic_scholar.search(request)
            case SearchApi.OPENALEX:
                return await self.openalex.search(request)
            case _:
                raise UnsupportedSearchApiError(f"Unsupported search API: {request.api}")

    async def citations(
        self, doi: str, direction: CitationDirection, limit: int
    ) -> list[SearchResult]:
        return await self.semantic_scholar.citations(doi, direction, limit)


@dataclass(frozen=True, slots=True)
class CitationLookupAdapter:
    """Expose :meth:`LiteratureSearchService.citations` as a callable port."""

    service: LiteratureSearchService

    async def __call__(
        self, doi: str, direction: CitationDirection, limit: int
    ) -> list[SearchResult]:
        return await self.service.citations(doi, direction, limit)

