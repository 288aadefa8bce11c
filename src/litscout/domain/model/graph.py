"""Knowledge graph entities mutated by the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .enums import EdgeType, NodeType, ProvenanceSource

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import (
        NodeStatus,
        ProcessingStatus,
        ReviewStatus,
        ScopeClassification,
    )

UNCLASSIFIED_TRUST = -1.0


@dataclass(kw_only=True)
class Provenance:
    source: ProvenanceSource = ProvenanceSource.HUMAN
    timestamp: datetime | None = None
    agent: str | None = None
    run_id: str | None = None
    search_query: str | None = None
    api_source: str | None = None
    ai_classification: ScopeClassification | None = None
    mapping_confidence: float | None = None


@dataclass(kw_only=True)
class Reference:
    id: str
    title: str
    authors: list[str] = field(default_factory=list[str])
    year: int | None = None
    publication: str = ""
    publisher: str = ""
    citation: str = ""
    description: str = ""
    doi: str | None = None
    url: str | None = None
    semantic_scholar_id: str | None = None
    open_alex_id: str | None = None
    abstract: str | None = None
    abstract_checksum: str | None = None
    discovery_candidate_id: str | None = None
    processing_status: ProcessingStatus | None = None
    review_status: ReviewStatus | None = None
    provenance: Provenance | None = None
    extras: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)


@dataclass(kw_only=True)
class GraphNode:
    id: str
    name: str
    description: str = ""
    category_id: str = ""
    keywords: list[str] = field(default_factory=list[str])
    type: NodeType = NodeType.REGULAR
    trust: float = UNCLASSIFIED_TRUST
    reference_ids: list[str] = field(default_factory=list[str])
    provenance: Provenance | None = None
    review_status: ReviewStatus | None = None
    status: NodeStatus | None = None
    extras: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)


@dataclass(kw_only=True)
class GraphEdge:
    id: str
    source_id: str
    target_id: str
    trust: float = UNCLASSIFIED_TRUST
    type: EdgeType = EdgeType.IMPLICATION
    combined_trust: float = UNCLASSIFIED_TRUST
    provenance: Provenance | None = None
    extras: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)


@dataclass(kw_only=True)
class Hypothesis:
    id: str
    statement: str
    support_ref_ids: list[str] = field(default_factory=list[str])
    contradict_ref_ids: list[str] = field(default_factory=list[str])
    created_at: datetime | None = None
    extras: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)


@dataclass(kw_only=True)
class Category:
    id: str
    name: str
    color: str = ""
    description: str = ""
    extras: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)


@dataclass(kw_only=True)
class GraphData:
    """In-memory graph aggregate.

    ``extras`` on each record holds file fields the pipeline does not interpret, so a
    load and save round trip keeps them.

    The pipeline mutates ``nodes``, ``edges`` and ``references`` in place; callers are
    responsible for persisting the graph afterwards.
    """

    root_id: str
    prefix: str = "P"
    last_node_number: int = 1
    version: int = 1
    nodes: list[GraphNode] = field(default_factory=list[GraphNode])
    edges: list[GraphEdge] = field(default_factory=list[GraphEdge])
    references: list[Reference] = field(default_factory=list[Reference])
    hypotheses: list[Hypothesis] = field(default_factory=list[Hypothesis])
    categories: list[Category] = field(default_factory=list[Category])
    metadata: dict[str, Any] = field(default_factory=dict[str, Any])
    extras: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)

    def node(self, node_id: str) -> GraphNode | None:
        return next((node for node in self.nodes if node.id == node_id), None)

    def allocate_node_id(self) -> str:
        self.last_node_number += 1
        return f"{self.prefix}{self.last_node_number}"


def create_empty_graph(prefix: str = "P") -> GraphData:
    root_id = f"{prefix}1"
    root = GraphNode(id=root_id, name="Root", trust=1.0)
    return GraphData(root_id=root_id, prefix=prefix, last_node_number=1, nodes=[root])
