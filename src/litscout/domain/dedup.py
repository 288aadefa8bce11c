"""Duplicate detection between a bibliographic candidate and existing references.

Strategies run in strict priority order and the first match wins:

1. ``exact-doi``: DOIs equal ignoring case
2. ``exact-s2id``: Semantic Scholar ids equal
3. ``exact-openalexid``: OpenAlex ids equal
4. ``fuzzy-title-year``: normalized titles equal (or one contains the other when both
   are long enough) and publication years at most one apart
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from litscout.domain.model import DuplicateMatchType

from .text import normalize_title

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from litscout.domain.model import Reference

FUZZY_MIN_TITLE_LENGTH = 10
YEAR_TOLERANCE = 1


class BibliographicRecord(Protocol):
    """Anything carrying the identifying fields of a publication."""

    @property
    def title(self) -> str: ...

    @property
    def year(self) -> int | None: ...

    @property
    def doi(self) -> str | None: ...

    @property
    def semantic_scholar_id(self) -> str | None: ...

    @property
    def open_alex_id(self) -> str | None: ...


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    match_type: DuplicateMatchType
    matched_id: str


def find_duplicate(
    candidate: BibliographicRecord,
    existing: Iterable[Reference],
    *,
    exclude_id: str | None = None,
) -> DuplicateMatch | None:
    """Return the first duplicate of ``candidate`` among ``existing``.

    References whose id equals ``exclude_id`` are the candidate's own record and never
    count as duplicates.
    """

    references = [ref for ref in existing if exclude_id is None or ref.id != exclude_id]
    for strategy in _STRATEGIES:
        match = strategy(candidate, references)
        if match is not None:
            return match
    return None


def _exact_doi(candidate: BibliographicRecord, refs: Sequence[Reference]) -> DuplicateMatch | None:
    doi = (candidate.doi or "").strip().lower()
    if not doi:
        return None
    for ref in refs:
        if ref.doi and ref.doi.strip().lower() == doi:
            return DuplicateMatch(DuplicateMatchType.EXACT_DOI, ref.id)
    return None


def _exact_s2id(candidate: BibliographicRecord, refs: Sequence[Reference]) -> DuplicateMatch | None:
    if not candidate.semantic_scholar_id:
        return None
    for ref in refs:
        if ref.semantic_scholar_id == candidate.semantic_scholar_id:
            return DuplicateMatch(DuplicateMatchType.EXACT_S2ID, ref.id)
    return None


def _exact_openalexid(
    candidate: BibliographicRecord, refs: Sequence[Reference]
) -> DuplicateMatch | None:
    if not candidate.open_alex_id:
        return None
    for ref in refs:
        if ref.open_alex_id == candidate.open_alex_id:
            return DuplicateMatch(DuplicateMatchType.EXACT_OPENALEXID, ref.id)
    return None


def _fuzzy_title_year(
    candidate: BibliographicRecord, refs: Sequence[Reference]
) -> DuplicateMatch | None:
    title = normalize_title(candidate.title)
    if len(title) <= FUZZY_MIN_TITLE_LENGTH:
        return None
    for ref in refs:
        if not years_close(candidate.year, ref.year):
            continue
        if titles_match(title, normalize_title(ref.title)):
            return DuplicateMatch(DuplicateMatchType.FUZZY_TITLE_YEAR, ref.id)
    return None


def titles_match(title: str, other: str) -> bool:
    """Compare two already-normalized titles."""

    if title == other:
        return True
    if len(title) <= FUZZY_MIN_TITLE_LENGTH or len(other) <= FUZZY_MIN_TITLE_LENGTH:
        return False
    return title in other or other in title


def years_close(left: int | None, right: int | None) -> bool:
    # unknown years compare as 0, so two undated records still match
    return abs((left or 0) - (right or 0)) <= YEAR_TOLERANCE


_STRATEGIES: tuple[
    Callable[[BibliographicRecord, Sequence[Reference]], DuplicateMatch | None], ...
] = (_exact_doi, _exact_s2id, _exact_openalexid, _fuzzy_title_year)
