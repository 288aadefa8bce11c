"""Public domain model surface."""

from __future__ import annotations

from litscout.domain.model.audit import AuditEntry, Snapshot
from litscout.domain.model.discovery import (
    DiscoveryEvent,
    DiscoveryFilters,
    DiscoverySummary,
    SearchResult,
)
from litscout.domain.model.enums import (
    CONSTRAINT_EDGE_TYPES,
    TRUST_AFFECTING_ACTIONS,
    Decision,
    DiscoveryAction,
    DuplicateMatchType,
    EdgeType,
    EntityKind,
    NodeStatus,
    NodeType,
    ProcessingStatus,
    ProvenanceSource,
    ReviewStatus,
    ScopeClassification,
    SearchApi,
    ValidationOutcome,
)
from litscout.domain.model.graph import (
    UNCLASSIFIED_TRUST,
    Category,
    GraphData,
    GraphEdge,
    GraphNode,
    Hypothesis,
    Provenance,
    Reference,
    create_empty_graph,
)

__all__ = [
    "CONSTRAINT_EDGE_TYPES",
    "TRUST_AFFECTING_ACTIONS",
    "UNCLASSIFIED_TRUST",
    "AuditEntry",
    "Category",
    "Decision",
    "DiscoveryAction",
    "DiscoveryEvent",
    "DiscoveryFilters",
    "DiscoverySummary",
    "DuplicateMatchType",
    "EdgeType",
    "EntityKind",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "Hypothesis",
    "NodeStatus",
    "NodeType",
    "ProcessingStatus",
    "Provenance",
    "Reference",
    "ReviewStatus",
    "ScopeClassification",
    "SearchApi",
    "SearchResult",
    "Snapshot",
    "ValidationOutcome",
    "create_empty_graph",
]
