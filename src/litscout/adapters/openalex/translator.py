"""Translate OpenAlex works into domain search results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from litscout.domain.model import SearchApi, SearchResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .schema import WorkPayload

DOI_URL_PREFIX = "https://doi.org/"


def reconstruct_abstract(inverted_index: Mapping[str, Sequence[int]]) -> str:
    """Rebuild plain text from OpenAlex's ``word -> positions`` abstract index."""

    positioned = [
        (position, word) for word, positions in inverted_index.items() for position in positions
    ]
    positioned.sort(key=lambda item: item[0])
    return " ".join(word for _, word in positioned)


def normalize_doi(value: str | None) -> str | None:
    if not value:
        return None
    doi = value.removeprefix(DOI_URL_PREFIX).strip()
    return doi or None


def parse_work(work: WorkPayload) -> SearchResult:
    authors = tuple(
        authorship.author.display_name
        for authorship in work.authorships or ()
        if authorship.author is not None and authorship.author.display_name
    )
    abstract = (
        reconstruct_abstract(work.abstract_inverted_index)
        if work.abstract_inverted_index
        else None
    )
    return SearchResult(
        title=(work.title or "").strip(),
        source=SearchApi.OPENALEX,
        authors=authors,
        year=work.publication_year,
        doi=normalize_doi(work.doi),
        abstract=abstract,
        url=work.id,
        open_alex_id=(work.ids.openalex if work.ids and work.ids.openalex else work.id),
    )
