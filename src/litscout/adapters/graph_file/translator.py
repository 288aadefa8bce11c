"""Translate between the graph JSON document and the domain graph."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litscout.domain.clock import as_utc
from litscout.domain.model import (
    Category,
    EdgeType,
    GraphData,
    GraphEdge,
    GraphNode,
    Hypothesis,
    NodeStatus,
    NodeType,
    ProcessingStatus,
    Provenance,
    ProvenanceSource,
    Reference,
    ReviewStatus,
    ScopeClassification,
)

from .schema import (
    CategoryModel,
    EdgeModel,
    GraphDocument,
    HypothesisModel,
    NodeModel,
    ProvenanceModel,
    ReferenceModel,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from pydantic import BaseModel

# Classic edge and node kinds are stored as integer codes; constraint edges by label.
_NODE_TYPE_CODES: dict[NodeType, int] = {
    NodeType.REGULAR: 0,
    NodeType.CHOOSER: 1,
    NodeType.HOLDER: 2,
}
_EDGE_TYPE_CODES: dict[EdgeType, int] = {
    EdgeType.IMPLICATION: 0,
    EdgeType.DERIVATION: 1,
    EdgeType.POSSIBILITY: 2,
}


def _decode_code[E: (NodeType, EdgeType)](
    value: int | str, codes: dict[E, int], enum_cls: type[E]
) -> E:
    if isinstance(value, int) or value.isdigit():
        code = int(value)
        for member, member_code in codes.items():
            if member_code == code:
                return member
        raise ValueError(f"Unknown {enum_cls.__name__} code: {value}")
    return enum_cls(value.lower())


def _encode_code[E: (NodeType, EdgeType)](value: E, codes: dict[E, int]) -> int | str:
    return codes.get(value, value.value)


def _utc(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


def _extras(model: BaseModel) -> dict[str, Any]:
    return dict(model.model_extra or {})


def _provenance_from_model(model: ProvenanceModel | None) -> Provenance | None:
    if model is None:
        return None
    return Provenance(
        source=ProvenanceSource(model.source),
        timestamp=_utc(model.timestamp),
        agent=model.agent,
        run_id=model.run_id,
        search_query=model.search_query,
        api_source=model.api_source,
        ai_classification=(
            ScopeClassification(model.ai_classification) if model.ai_classification else None
        ),
        mapping_confidence=model.mapping_confidence,
    )


def _provenance_to_model(provenance: Provenance | None) -> ProvenanceModel | None:
    if provenance is None:
        return None
    return ProvenanceModel(
        source=provenance.source.value,
        timestamp=provenance.timestamp,
        agent=provenance.agent,
        run_id=provenance.run_id,
        search_query=provenance.search_query,
        api_source=provenance.api_source,
        ai_classification=(
            provenance.ai_classification.value if provenance.ai_classification else None
        ),
        mapping_confidence=provenance.mapping_confidence,
    )


def highest_node_number(prefix: str, node_ids: Iterable[str]) -> int:
    """Largest numeric suffix among ids shaped like ``<prefix><number>``."""

    highest = 0
    for node_id in node_ids:
        suffix = node_id.removeprefix(prefix)
        if suffix != node_id and suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


def document_to_graph(document: GraphDocument) -> GraphData:
    # a stale counter in the file must not hand out an id already in use
    last_node_number = max(
        document.last_node_number,
        highest_node_number(document.prefix, (node.id for node in document.nodes)),
    )
    return GraphData(
        root_id=document.root_id,
        prefix=document.prefix,
        last_node_number=last_node_number,
        version=document.version,
        nodes=[_node_from_model(node) for node in document.nodes],
        edges=[_edge_from_model(edge) for edge in document.edges],
        references=[_reference_from_model(ref) for ref in document.references],
        hypotheses=[_hypothesis_from_model(item) for item in document.hypotheses],
        categories=[
            Category(
                id=category.id,
                name=category.name,
                color=category.color,
                description=category.description,
                extras=_extras(category),
            )
            for category in document.categories
        ],
        metadata=dict(document.metadata or {}),
        extras=_extras(document),
    )


def graph_to_document(graph: GraphData) -> GraphDocument:
    return GraphDocument(
        version=graph.version,
        prefix=graph.prefix,
        root_id=graph.root_id,
        last_node_number=graph.last_node_number,
        nodes=[_node_to_model(node) for node in graph.nodes],
        edges=[_edge_to_model(edge) for edge in graph.edges],
        categories=[
            CategoryModel(
                id=category.id,
                name=category.name,
                color=category.color,
                description=category.description,
                **category.extras,
            )
            for category in graph.categories
        ],
        references=[_reference_to_model(ref) for ref in graph.references],
        hypotheses=[_hypothesis_to_model(item) for item in graph.hypotheses],
        metadata=graph.metadata or None,
        **graph.extras,
    )


def _node_from_model(model: NodeModel) -> GraphNode:
    return GraphNode(
        id=model.id,
        name=model.name,
        description=model.description,
        category_id=model.category_id,
        keywords=list(model.keywords),
        type=_decode_code(model.type, _NODE_TYPE_CODES, NodeType),
        trust=model.trust,
        reference_ids=list(model.reference_ids),
        provenance=_provenance_from_model(model.provenance),
        review_status=ReviewStatus(model.review_status) if model.review_status else None,
        status=NodeStatus(model.status) if model.status else None,
        extras=_extras(model),
    )


def _node_to_model(node: GraphNode) -> NodeModel:
    return NodeModel(
        id=node.id,
        name=node.name,
        description=node.description,
        category_id=node.category_id,
        keywords=list(node.keywords),
        type=_encode_code(node.type, _NODE_TYPE_CODES),
        trust=node.trust,
        reference_ids=list(node.reference_ids),
        provenance=_provenance_to_model(node.provenance),
        review_status=node.review_status.value if node.review_status else None,
        status=node.status.value if node.status else None,
        **node.extras,
    )


def _edge_from_model(model: EdgeModel) -> GraphEdge:
    return GraphEdge(
        id=model.id,
        source_id=model.source_id,
        target_id=model.target_id,
        trust=model.trust,
        type=_decode_code(model.type, _EDGE_TYPE_CODES, EdgeType),
        combined_trust=model.combined_trust,
        provenance=_provenance_from_model(model.provenance),
        extras=_extras(model),
    )


def _edge_to_model(edge: GraphEdge) -> EdgeModel:
    return EdgeModel(
        id=edge.id,
        source_id=edge.source_id,
        target_id=edge.target_id,
        trust=edge.trust,
        type=_encode_code(edge.type, _EDGE_TYPE_CODES),
        combined_trust=edge.combined_trust,
        provenance=_provenance_to_model(edge.provenance),
        **edge.extras,
    )


def _reference_from_model(model: ReferenceModel) -> Reference:
    return Reference(
        id=model.id,
        title=model.title,
        authors=list(model.authors),
        year=model.year or None,
        publication=model.publication,
        publisher=model.publisher,
        citation=model.citation,
        description=model.description,
        doi=model.doi or None,
        url=model.url or None,
        semantic_scholar_id=model.semantic_scholar_id or None,
        open_alex_id=model.open_alex_id or None,
        abstract=model.abstract or None,
        abstract_checksum=model.abstract_checksum,
        discovery_candidate_id=model.discovery_candidate_id,
        processing_status=(
            ProcessingStatus(model.processing_status) if model.processing_status else None
        ),
        review_status=ReviewStatus(model.review_status) if model.review_status else None,
        provenance=_provenance_from_model(model.provenance),
        extras=_extras(model),
    )


def _reference_to_model(ref: Reference) -> ReferenceModel:
    return ReferenceModel(
        id=ref.id,
        title=ref.title,
        authors=list(ref.authors),
        year=ref.year or 0,
        publication=ref.publication,
        publisher=ref.publisher,
        citation=ref.citation,
        description=ref.description,
        doi=ref.doi,
        url=ref.url,
        semantic_scholar_id=ref.semantic_scholar_id,
        open_alex_id=ref.open_alex_id,
        abstract=ref.abstract,
        abstract_checksum=ref.abstract_checksum,
        discovery_candidate_id=ref.discovery_candidate_id,
        processing_status=ref.processing_status.value if ref.processing_status else None,
        review_status=ref.review_status.value if ref.review_status else None,
        provenance=_provenance_to_model(ref.provenance),
        **ref.extras,
    )


def _hypothesis_from_model(model: HypothesisModel) -> Hypothesis:
    return Hypothesis(
        id=model.id,
        statement=model.statement,
        support_ref_ids=list(model.support_ref_ids),
        contradict_ref_ids=list(model.contradict_ref_ids),
        created_at=_utc(model.created_at),
        extras=_extras(model),
    )


def _hypothesis_to_model(hypothesis: Hypothesis) -> HypothesisModel:
    return HypothesisModel(
        id=hypothesis.id,
        statement=hypothesis.statement,
        support_ref_ids=list(hypothesis.support_ref_ids),
        contradict_ref_ids=list(hypothesis.contradict_ref_ids),
        created_at=hypothesis.created_at,
        **hypothesis.extras,
    )
