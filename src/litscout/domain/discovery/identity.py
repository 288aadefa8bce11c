"""Stable candidate identity and initial decisions for search results."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from litscout.domain.dedup import find_duplicate
from litscout.domain.model import Decision, DiscoveryAction, DiscoveryEvent
from litscout.domain.text import normalize_text, normalize_title

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from litscout.domain.model import Reference, SearchResult

TITLE_HASH_LENGTH = 16


def compute_candidate_id(result: SearchResult) -> str:
    """Identity precedence: DOI, Semantic Scholar id, OpenAlex id, title and year hash."""

    doi = (result.doi or "").strip().lower()
    if doi:
        return f"doi:{doi}"
    if result.semantic_scholar_id:
        return f"s2:{result.semantic_scholar_id}"
    if result.open_alex_id:
        return f"oa:{result.open_alex_id}"
    key = f"{normalize_title(result.title)}|{result.year or 0}"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"title-year:{digest[:TITLE_HASH_LENGTH]}"


def abstract_checksum(abstract: str | None) -> str | None:
    normalized = normalize_text(abstract)
    if not normalized:
        return None
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def decision_for_search_result(
    result: SearchResult, references: Sequence[Reference]
) -> tuple[Decision, str | None]:
    match = find_duplicate(result, references)
    if match is None:
        return Decision.QUEUED, None
    return Decision.DUPLICATE, f"{match.match_type}:{match.matched_id}"


def create_discovery_event(
    result: SearchResult,
    query: str,
    run_id: str,
    references: Sequence[Reference],
    *,
    timestamp: datetime,
) -> DiscoveryEvent:
    decision, reason = decision_for_search_result(result, references)
    return DiscoveryEvent(
        candidate_id=compute_candidate_id(result),
        timestamp=timestamp,
        action=DiscoveryAction.DISCOVER,
        source=result.source,
        discovered_at=timestamp,
        query=query,
        title=result.title,
        authors=tuple(result.authors),
        year=result.year,
        doi=result.doi,
        url=result.url,
        abstract=result.abstract,
        abstract_checksum=abstract_checksum(result.abstract),
        semantic_scholar_id=result.semantic_scholar_id,
        open_alex_id=result.open_alex_id,
        decision=decision,
        decision_reason=reason,
        run_id=run_id,
    )
