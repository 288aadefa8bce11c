"""Ports for fetching candidate publications from literature APIs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from litscout.domain.model import SearchResult


class CitationDirection(StrEnum):
    CITING = "citing"
    CITED_BY = "cited-by"


@dataclass(frozen=True, slots=True, kw_only=True)
class SearchRequest:
    query: str
    api: str
    limit: int = 20
    year_min: int | None = None
    year_max: int | None = None


@runtime_checkable
class LiteratureSearch(Protocol):
    """Async port returning publication records for one query against one API."""

    async def __call__(self, request: SearchRequest) -> list[SearchResult]: ...


@runtime_checkable
class CitationLookup(Protocol):
    """Async port returning works citing (or cited by) the work with ``doi``."""

    async def __call__(
        self, doi: str, direction: CitationDirection, limit: int
    ) -> list[SearchResult]: ...


__all__ = ["CitationDirection", "CitationLookup", "LiteratureSearch", "SearchRequest"]
