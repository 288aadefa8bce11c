"""Discovery candidate records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, datetime

    from .enums import Decision, DiscoveryAction, ScopeClassification


@dataclass(frozen=True, slots=True, kw_only=True)
class SearchResult:
    """Publication record as returned by a literature search API."""

    title: str
    source: str
    authors: tuple[str, ...] = ()
    year: int | None = None
    doi: str | None = None
    abstract: str | None = None
    url: str | None = None
    semantic_scholar_id: str | None = None
    open_alex_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DiscoveryEvent:
    """One immutable state transition for a discovery candidate."""

    candidate_id: str
    timestamp: datetime
    action: DiscoveryAction
    source: str
    discovered_at: datetime
    query: str
    title: str
    decision: Decision
    run_id: str
    authors: tuple[str, ...] = ()
    year: int | None = None
    doi: str | None = None
    url: str | None = None
    abstract: str | None = None
    abstract_checksum: str | None = None
    semantic_scholar_id: str | None = None
    open_alex_id: str | None = None
    decision_reason: str | None = None
    classification: ScopeClassification | None = None
    linked_node_ids: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DiscoveryFilters:
    decision: Decision | None = None
    source: str | None = None
    run_id: str | None = None
    date: date | None = None
    text: str | None = None


@dataclass(frozen=True, slots=True)
class DiscoverySummary:
    date: date | None
    total_events: int
    total_candidates: int
    by_decision: dict[str, int] = field(default_factory=dict[str, int])
