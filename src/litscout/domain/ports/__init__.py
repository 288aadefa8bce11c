"""Domain ports (protocols implemented by adapters)."""

from __future__ import annotations

from .fetching import CitationDirection, CitationLookup, LiteratureSearch, SearchRequest
from .graph import TrustPropagator
from .persistence import AuditEntryStore, DiscoveryEventStore

__all__ = [
    "AuditEntryStore",
    "CitationDirection",
    "CitationLookup",
    "DiscoveryEventStore",
    "LiteratureSearch",
    "SearchRequest",
    "TrustPropagator",
]
