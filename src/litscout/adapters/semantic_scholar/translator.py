"""Translate Semantic Scholar payloads into domain search results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from litscout.domain.model import SearchApi, SearchResult

if TYPE_CHECKING:
    from .schema import PaperPayload


def parse_paper(paper: PaperPayload) -> SearchResult:
    authors = tuple(author.name for author in paper.authors or () if author.name)
    return SearchResult(
        title=(paper.title or "").strip(),
        source=SearchApi.SEMANTIC_SCHOLAR,
        authors=authors,
        year=paper.year,
        doi=paper.external_ids.doi if paper.external_ids else None,
        abstract=paper.abstract,
        url=paper.url,
        semantic_scholar_id=paper.paper_id,
    )
