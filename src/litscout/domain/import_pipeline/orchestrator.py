"""Import queued discovery candidates into the graph.

For every ranked candidate the orchestrator either rejects it (scope or publish gate),
marks it duplicate, or creates a draft reference, links it to matching nodes and
optionally grows a new node under the best-matching parent. Each branch appends a
decision event to the discovery log and an entry to the audit trail; policy
rejections never raise and never abort the remaining candidates.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from litscout.domain.audit_trail import snapshot
from litscout.domain.clock import utc_date, utc_now
from litscout.domain.confidence import confidence_signals, score_node_confidence
from litscout.domain.governance import NodeDraft, ReferenceDraft, run_publish_gate
from litscout.domain.model import (
    Decision,
    DiscoveryFilters,
    EdgeType,
    EntityKind,
    GraphEdge,
    GraphNode,
    ProcessingStatus,
    Provenance,
    ProvenanceSource,
    Reference,
    ReviewStatus,
    ScopeClassification,
    ValidationOutcome,
)
from litscout.domain.node_growth import (
    choose_parent,
    derive_node_keywords,
    derive_node_name,
    describe_node,
    find_node_duplicate,
)
from litscout.domain.scope import CandidateText, classify_scope, suggest_node_links
from litscout.domain.trust import propagate_trust

from .result import ImportDetail, ImportResult, NodeDecision, NodeDetail, SkipCode

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litscout.config import GovernanceConfig
    from litscout.domain.audit_trail import AuditTrail
    from litscout.domain.clock import Clock
    from litscout.domain.discovery import DiscoveryLog
    from litscout.domain.model import DiscoveryEvent, GraphData
    from litscout.domain.ports import TrustPropagator
    from litscout.domain.scope import ScopeAssessment

    from .options import ImportOptions

log = getLogger(__name__)

AGENT_NAME = "discovery-import"
REFERENCE_ACTION = "discovery-import-reference"
NODE_ACTION = "discovery-import-node"
EDGE_ACTION = "discovery-import-edge"
OUT_OF_SCOPE_PREFIX = "out-of-scope-auto-filter"


def new_reference_id() -> str:
    return f"ref-{uuid4().hex[:12]}"


def processing_status_for(review_status: ReviewStatus) -> ProcessingStatus:
    if review_status is ReviewStatus.APPROVED:
        return ProcessingStatus.APPROVED
    if review_status is ReviewStatus.REJECTED:
        return ProcessingStatus.REJECTED
    return ProcessingStatus.IMPORTED_DRAFT


@dataclass(slots=True)
class _Ranked:
    candidate: DiscoveryEvent
    text: CandidateText
    scope: ScopeAssessment


class ImportOrchestrator:
    """Run the candidate-to-reference pipeline against one in-memory graph."""

    def __init__(
        self,
        *,
        discovery_log: DiscoveryLog,
        audit_trail: AuditTrail,
        graph: GraphData,
        governance: GovernanceConfig,
        trust_propagator: TrustPropagator = propagate_trust,
        clock: Clock = utc_now,
        reference_id_factory: Callable[[], str] = new_reference_id,
    ) -> None:
        self._log = discovery_log
        self._audit = audit_trail
        self._graph = graph
        self._governance = governance
        self._propagate = trust_propagator
        self._clock = clock
        self._new_reference_id = reference_id_factory

    def run(self, options: ImportOptions) -> ImportResult:
        queued = self._log.list(
            DiscoveryFilters(
                decision=Decision.QUEUED, run_id=options.source_run_id, date=options.date
            )
        )
        ranked = self._rank(queued, options)
        attempted = ranked[: max(0, options.max_items)]
        result = ImportResult(
            run_id=options.run_id,
            source_run_id=options.source_run_id,
            scanned_queued=len(queued),
            attempted=len(attempted),
        )
        log.info(
            "Importing %d of %d queued candidates (run %s)",
            len(attempted),
            len(queued),
            options.run_id,
        )
        for item in attempted:
            self._process(item, options, result)
        log.info(
            "Import run %s: imported=%d duplicates=%d rejected=%d nodes_created=%d",
            options.run_id,
            result.imported,
            result.duplicates,
            result.rejected,
            result.nodes_created,
        )
        return result

    def _rank(self, queued: list[DiscoveryEvent], options: ImportOptions) -> list[_Ranked]:
        ranked: list[_Ranked] = []
        for candidate in queued:
            text = CandidateText.from_event(candidate)
            scope = classify_scope(text, self._graph.nodes, self._graph.root_id, options.scope)
            ranked.append(_Ranked(candidate, text, scope))
        # score descending, newest first within equal scores
        ranked.sort(key=lambda item: item.candidate.timestamp, reverse=True)
        ranked.sort(key=lambda item: item.scope.scope_score, reverse=True)
        return ranked

    def _process(self, item: _Ranked, options: ImportOptions, result: ImportResult) -> None:
        candidate, scope = item.candidate, item.scope
        out_of_scope = scope.classification is ScopeClassification.OUT_OF_SCOPE
        if options.enforce_scope_filter and out_of_scope:
            self._reject_out_of_scope(item, options, result)
            return

        draft = ReferenceDraft(
            title=candidate.title.strip(),
            authors=candidate.authors,
            year=candidate.year,
            doi=candidate.doi,
            url=candidate.url,
            semantic_scholar_id=candidate.semantic_scholar_id,
            open_alex_id=candidate.open_alex_id,
        )
        gate = run_publish_gate(
            references=[draft],
            existing_nodes=self._graph.nodes,
            existing_references=self._graph.references,
            config=self._governance,
            today=utc_date(self._clock()),
        )
        if not gate.valid:
            self._reject_at_gate(item, gate.errors, bool(gate.duplicates), options, result)
            return

        ref = self._create_reference(candidate, scope, options)
        linked = suggest_node_links(
            item.text,
            self._graph.nodes,
            self._graph.root_id,
            max_linked_nodes=options.max_linked_nodes,
        )
        for node_id in linked:
            node = self._graph.node(node_id)
            if node is not None and ref.id not in node.reference_ids:
                node.reference_ids.append(ref.id)
        result.linked_node_count += len(linked)
        result.imported += 1
        result.imported_ref_ids.append(ref.id)

        node_detail = self._grow_node(item, ref, options, result)
        result.node_details.append(node_detail)
        if node_detail.code is not None:
            result.note_skip(node_detail.code, candidate.candidate_id)
        linked_ids = [*linked, node_detail.node_id] if node_detail.node_id else list(linked)

        reason = f"imported as {ref.id}"
        self._log.record_decision(
            candidate,
            run_id=options.run_id,
            decision=Decision.IMPORTED_DRAFT,
            reason=reason,
            classification=scope.classification,
            linked_node_ids=tuple(linked_ids),
        )
        self._audit.entry(
            run_id=options.run_id,
            action=REFERENCE_ACTION,
            entity_type=EntityKind.REFERENCE,
            entity_id=ref.id,
            outcome=ValidationOutcome.ACCEPTED,
            after=snapshot(
                refId=ref.id,
                title=candidate.title,
                candidateId=candidate.candidate_id,
                linkedNodeIds=linked_ids,
            ),
            ai_rationale="Queued discovery candidate imported to draft reference",
            source_apis=(candidate.source,),
            ai_classification=scope.classification,
        )
        result.details.append(
            ImportDetail(
                candidate_id=candidate.candidate_id,
                title=candidate.title,
                decision=Decision.IMPORTED_DRAFT,
                classification=scope.classification,
                scope_score=scope.scope_score,
                reason=reason,
                ref_id=ref.id,
                linked_node_ids=linked_ids,
            )
        )

    def _reject_out_of_scope(
        self, item: _Ranked, options: ImportOptions, result: ImportResult
    ) -> None:
        candidate, scope = item.candidate, item.scope
        reason = f"{OUT_OF_SCOPE_PREFIX}: {scope.reason or 'scope policy rejected candidate'}"
        result.out_of_scope += 1
        result.rejected += 1
        result.note_skip(SkipCode.OUT_OF_SCOPE, candidate.candidate_id)
        self._log.record_decision(
            candidate,
            run_id=options.run_id,
            decision=Decision.REJECTED,
            reason=reason,
            classification=ScopeClassification.OUT_OF_SCOPE,
        )
        self._audit.entry(
            run_id=options.run_id,
            action=REFERENCE_ACTION,
            entity_type=EntityKind.REFERENCE,
            entity_id=candidate.candidate_id,
            outcome=ValidationOutcome.REJECTED,
            after=snapshot(candidateId=candidate.candidate_id, title=candidate.title),
            reason=reason,
            ai_rationale="Auto-scope filter rejected candidate before import",
            source_apis=(candidate.source,),
            ai_classification=ScopeClassification.OUT_OF_SCOPE,
        )
        result.details.append(
            ImportDetail(
                candidate_id=candidate.candidate_id,
                title=candidate.title,
                decision=Decision.REJECTED,
                classification=ScopeClassification.OUT_OF_SCOPE,
                scope_score=scope.scope_score,
                reason=reason,
            )
        )

    def _reject_at_gate(
        self,
        item: _Ranked,
        errors: list[str],
        duplicate: bool,
        options: ImportOptions,
        result: ImportResult,
    ) -> None:
        candidate, scope = item.candidate, item.scope
        if duplicate:
            reason = next((e for e in errors if "Duplicate reference detected" in e), errors[0])
            decision, outcome = Decision.DUPLICATE, ValidationOutcome.SKIPPED_DUPLICATE
            code, rationale = SkipCode.DUPLICATE_REFERENCE, "Publish gate duplicate rejection"
            result.duplicates += 1
        else:
            reason = errors[0] if errors else SkipCode.PUBLISH_GATE_REJECTED.value
            decision, outcome = Decision.REJECTED, ValidationOutcome.REJECTED
            code, rationale = SkipCode.PUBLISH_GATE_REJECTED, "Publish gate rejected candidate"
            result.rejected += 1
        result.note_skip(code, candidate.candidate_id)

        self._log.record_decision(
            candidate,
            run_id=options.run_id,
            decision=decision,
            reason=reason,
            classification=scope.classification,
        )
        self._audit.entry(
            run_id=options.run_id,
            action=REFERENCE_ACTION,
            entity_type=EntityKind.REFERENCE,
            entity_id=candidate.candidate_id,
            outcome=outcome,
            after=snapshot(candidateId=candidate.candidate_id, title=candidate.title),
            reason=reason,
            ai_rationale=rationale,
            validation_errors=errors,
            source_apis=(candidate.source,),
            ai_classification=scope.classification,
        )
        result.details.append(
            ImportDetail(
                candidate_id=candidate.candidate_id,
                title=candidate.title,
                decision=decision,
                classification=scope.classification,
                scope_score=scope.scope_score,
                reason=reason,
            )
        )

    def _provenance(
        self, candidate: DiscoveryEvent, scope: ScopeAssessment, options: ImportOptions
    ) -> Provenance:
        return Provenance(
            source=ProvenanceSource.AGENT,
            agent=AGENT_NAME,
            timestamp=self._clock(),
            run_id=options.run_id,
            search_query=candidate.query,
            api_source=candidate.source,
            ai_classification=scope.classification,
        )

    def _create_reference(
        self, candidate: DiscoveryEvent, scope: ScopeAssessment, options: ImportOptions
    ) -> Reference:
        ref = Reference(
            id=self._new_reference_id(),
            title=candidate.title.strip(),
            authors=list(candidate.authors),
            year=candidate.year,
            description=f'Discovered from query "{candidate.query}"',
            doi=candidate.doi,
            url=candidate.url,
            semantic_scholar_id=candidate.semantic_scholar_id,
            open_alex_id=candidate.open_alex_id,
            abstract=candidate.abstract,
            abstract_checksum=candidate.abstract_checksum,
            discovery_candidate_id=candidate.candidate_id,
            review_status=options.review_status,
            processing_status=processing_status_for(options.review_status),
            provenance=self._provenance(candidate, scope, options),
        )
        self._graph.references.append(ref)
        return ref

    def _grow_node(
        self, item: _Ranked, ref: Reference, options: ImportOptions, result: ImportResult
    ) -> NodeDetail:
        candidate, scope = item.candidate, item.scope
        policy = options.node_growth
        detail = NodeDetail(candidate_id=candidate.candidate_id, decision=NodeDecision.SKIPPED)

        if not policy.enabled:
            return self._skip_node(
                detail, SkipCode.NODE_GROWTH_DISABLED, "node growth disabled", item, options
            )
        if result.nodes_created >= policy.max_new_nodes:
            return self._skip_node(
                detail,
                SkipCode.NODE_CAP_REACHED,
                f"per-run node cap reached ({policy.max_new_nodes})",
                item,
                options,
                outcome=ValidationOutcome.CAP_EXCEEDED,
            )
        parent = choose_parent(item.text, self._graph.nodes, self._graph.root_id)
        if parent is None:
            return self._skip_node(
                detail, SkipCode.MISSING_PARENT_NODE, "no parent node available", item, options
            )

        name = derive_node_name(candidate.title)
        keywords = derive_node_keywords(
            candidate.title, scope.matched_keywords, max_keywords=policy.max_keywords
        )
        detail.proposed_name = name
        detail.parent_id = parent.node.id

        result.nodes_proposed += 1
        signals = confidence_signals(
            text=item.text,
            title=candidate.title,
            scope=scope,
            parent=parent.node,
            parent_link_score=parent.link_score,
            scope_keywords=options.scope.scope_keywords,
            weights=options.confidence_weights,
        )
        confidence = score_node_confidence(
            signals, scope.classification, policy.min_node_confidence, options.confidence_weights
        )
        detail.confidence = confidence.confidence
        detail.threshold = confidence.threshold
        if not confidence.accepted:
            return self._skip_node(
                detail, SkipCode.LOW_NODE_CONFIDENCE, confidence.skip_reason(), item, options
            )

        duplicate = find_node_duplicate(name, keywords, self._graph.nodes, policy)
        if duplicate is not None:
            result.node_duplicates += 1
            detail.decision = NodeDecision.DUPLICATE
            detail.node_id = None
            return self._skip_node(
                detail,
                SkipCode.NODE_DUPLICATE,
                f"{SkipCode.NODE_DUPLICATE}:{duplicate.rule}:{duplicate.node_id}",
                item,
                options,
                outcome=ValidationOutcome.SKIPPED_DUPLICATE,
            )

        description = describe_node(candidate.title, candidate.query)
        gate = run_publish_gate(
            nodes=[NodeDraft(name=name, description=description)],
            existing_nodes=self._graph.nodes,
            existing_references=self._graph.references,
            config=self._governance,
            today=utc_date(self._clock()),
        )
        if not gate.valid:
            result.node_rejected += 1
            detail.decision = NodeDecision.REJECTED
            return self._skip_node(
                detail,
                SkipCode.NODE_GOVERNANCE_REJECTED,
                gate.errors[0],
                item,
                options,
                errors=gate.errors,
            )

        node = self._create_node(
            item, ref, name, keywords, description, confidence.confidence, options
        )
        edge = self._create_edge(parent.node.id, node, item, options)
        self._repropagate()
        result.nodes_created += 1
        result.created_node_ids.append(node.id)
        detail.decision = NodeDecision.CREATED
        detail.node_id = node.id
        detail.reason = f"created {node.id} under {parent.node.id}"
        log.info("Created node %s (%s) under %s", node.id, name, parent.node.id)

        self._audit.entry(
            run_id=options.run_id,
            action=NODE_ACTION,
            entity_type=EntityKind.NODE,
            entity_id=node.id,
            outcome=ValidationOutcome.ACCEPTED,
            after=snapshot(
                nodeId=node.id,
                name=node.name,
                parentId=parent.node.id,
                candidateId=candidate.candidate_id,
                refId=ref.id,
            ),
            ai_rationale="Auto node growth from imported discovery candidate",
            validation_errors=gate.warnings,
            source_apis=(candidate.source,),
            ai_classification=scope.classification,
            mapping_confidence=confidence.confidence,
        )
        self._audit.entry(
            run_id=options.run_id,
            action=EDGE_ACTION,
            entity_type=EntityKind.EDGE,
            entity_id=edge.id,
            outcome=ValidationOutcome.ACCEPTED,
            after=snapshot(edgeId=edge.id, sourceId=edge.source_id, targetId=edge.target_id),
            ai_rationale="Parent link for auto-grown node",
            source_apis=(candidate.source,),
            mapping_confidence=confidence.confidence,
        )
        return detail

    def _skip_node(
        self,
        detail: NodeDetail,
        code: SkipCode,
        reason: str,
        item: _Ranked,
        options: ImportOptions,
        *,
        outcome: ValidationOutcome = ValidationOutcome.REJECTED,
        errors: list[str] | None = None,
    ) -> NodeDetail:
        detail.code = code
        detail.reason = reason
        candidate = item.candidate
        self._audit.entry(
            run_id=options.run_id,
            action=NODE_ACTION,
            entity_type=EntityKind.NODE,
            entity_id=detail.node_id or candidate.candidate_id,
            outcome=outcome,
            after=snapshot(
                candidateId=candidate.candidate_id,
                proposedName=detail.proposed_name,
                parentId=detail.parent_id,
                code=code.value,
            ),
            reason=reason,
            validation_errors=errors or (),
            source_apis=(candidate.source,),
            ai_classification=item.scope.classification,
            mapping_confidence=detail.confidence,
        )
        log.debug("Node growth skipped for %s: %s", candidate.candidate_id, reason)
        return detail

    def _create_node(
        self,
        item: _Ranked,
        ref: Reference,
        name: str,
        keywords: list[str],
        description: str,
        confidence: float,
        options: ImportOptions,
    ) -> GraphNode:
        provenance = self._provenance(item.candidate, item.scope, options)
        provenance.mapping_confidence = confidence
        node = GraphNode(
            id=self._graph.allocate_node_id(),
            name=name,
            description=description,
            keywords=keywords,
            reference_ids=[ref.id],
            provenance=provenance,
            review_status=options.node_growth.review_status,
        )
        self._graph.nodes.append(node)
        return node

    def _create_edge(
        self, parent_id: str, node: GraphNode, item: _Ranked, options: ImportOptions
    ) -> GraphEdge:
        edge = GraphEdge(
            id=f"{parent_id}-{node.id}",
            source_id=parent_id,
            target_id=node.id,
            type=EdgeType.IMPLICATION,
            provenance=self._provenance(item.candidate, item.scope, options),
        )
        self._graph.edges.append(edge)
        return edge

    def _repropagate(self) -> None:
        nodes, edges = self._propagate(self._graph.nodes, self._graph.edges, self._graph.root_id)
        self._graph.nodes = list(nodes)
        self._graph.edges = list(edges)


def import_queued_candidates(
    *,
    discovery_log: DiscoveryLog,
    audit_trail: AuditTrail,
    graph: GraphData,
    governance: GovernanceConfig,
    options: ImportOptions,
    trust_propagator: TrustPropagator = propagate_trust,
    now: Callable[[], datetime] = utc_now,
) -> ImportResult:
    """Convenience wrapper running a fresh :class:`ImportOrchestrator`."""

    orchestrator = ImportOrchestrator(
        discovery_log=discovery_log,
        audit_trail=audit_trail,
        graph=graph,
        governance=governance,
        trust_propagator=trust_propagator,
        clock=now,
    )
    return orchestrator.run(options)
