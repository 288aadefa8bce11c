"""Pydantic models describing the graph JSON document."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GraphFileModel(BaseModel):
    """camelCase document model; keys it does not declare are kept as extras."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class ProvenanceModel(GraphFileModel):
    source: str = "human"
    timestamp: datetime | None = None
    agent: str | None = None
    run_id: str | None = None
    search_query: str | None = None
    api_source: str | None = None
    ai_classification: str | None = None
    mapping_confidence: float | None = None


class NodeModel(GraphFileModel):
    id: str
    name: str = ""
    description: str = ""
    category_id: str = ""
    keywords: list[str] = Field(default_factory=list[str])
    type: int | str = 0
    trust: float = -1.0
    reference_ids: list[str] = Field(default_factory=list[str])
    provenance: ProvenanceModel | None = None
    review_status: str | None = None
    status: str | None = None


class EdgeModel(GraphFileModel):
    id: str
    source_id: str
    target_id: str
    trust: float = -1.0
    type: int | str = 0
    combined_trust: float = -1.0
    provenance: ProvenanceModel | None = None


class ReferenceModel(GraphFileModel):
    id: str
    title: str = ""
    authors: list[str] = Field(default_factory=list[str])
    year: int | None = 0
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
    processing_status: str | None = None
    review_status: str | None = None
    provenance: ProvenanceModel | None = None


class HypothesisModel(GraphFileModel):
    id: str
    statement: str = ""
    support_ref_ids: list[str] = Field(default_factory=list[str])
    contradict_ref_ids: list[str] = Field(default_factory=list[str])
    created_at: datetime | None = None


class CategoryModel(GraphFileModel):
    id: str
    name: str = ""
    color: str = ""
    description: str = ""


class GraphDocument(GraphFileModel):
    version: int = 1
    prefix: str = "P"
    root_id: str
    last_node_number: int = 1
    nodes: list[NodeModel] = Field(default_factory=list[NodeModel])
    edges: list[EdgeModel] = Field(default_factory=list[EdgeModel])
    categories: list[CategoryModel] = Field(default_factory=list[CategoryModel])
    references: list[ReferenceModel] = Field(default_factory=list[ReferenceModel])
    hypotheses: list[HypothesisModel] = Field(default_factory=list[HypothesisModel])
    metadata: dict[str, Any] | None = None
