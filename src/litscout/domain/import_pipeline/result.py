"""Structured outcome of an import run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from litscout.domain.model import Decision, ScopeClassification

MAX_SKIP_SAMPLES = 5


class SkipCode(StrEnum):
    OUT_OF_SCOPE = "out-of-scope"
    DUPLICATE_REFERENCE = "duplicate-reference"
    PUBLISH_GATE_REJECTED = "publish-gate-rejected"
    NODE_GROWTH_DISABLED = "node-growth-disabled"
    NODE_CAP_REACHED = "node-cap-reached"
    MISSING_PARENT_NODE = "missing-parent-node"
    LOW_NODE_CONFIDENCE = "low-node-confidence"
    NODE_DUPLICATE = "node-duplicate"
    NODE_GOVERNANCE_REJECTED = "node-governance-rejected"


class NodeDecision(StrEnum):
    CREATED = "created"
    SKIPPED = "skipped"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"


@dataclass(slots=True, kw_only=True)
class ImportDetail:
    candidate_id: str
    title: str
    decision: Decision
    classification: ScopeClassification | None = None
    scope_score: int | None = None
    reason: str | None = None
    ref_id: str | None = None
    linked_node_ids: list[str] = field(default_factory=list[str])


@dataclass(slots=True, kw_only=True)
class NodeDetail:
    candidate_id: str
    decision: NodeDecision
    code: SkipCode | None = None
    reason: str | None = None
    proposed_name: str | None = None
    node_id: str | None = None
    parent_id: str | None = None
    confidence: float | None = None
    threshold: float | None = None


@dataclass(slots=True)
class SkipReasonSummary:
    code: SkipCode
    count: int = 0
    sample_candidate_ids: list[str] = field(default_factory=list[str])


@dataclass(slots=True, kw_only=True)
class ImportResult:
    run_id: str
    source_run_id: str | None = None
    scanned_queued: int = 0
    attempted: int = 0
    imported: int = 0
    duplicates: int = 0
    rejected: int = 0
    out_of_scope: int = 0
    linked_node_count: int = 0
    nodes_proposed: int = 0
    nodes_created: int = 0
    node_duplicates: int = 0
    node_rejected: int = 0
    imported_ref_ids: list[str] = field(default_factory=list[str])
    created_node_ids: list[str] = field(default_factory=list[str])
    details: list[ImportDetail] = field(default_factory=list[ImportDetail])
    node_details: list[NodeDetail] = field(default_factory=list[NodeDetail])
    skip_reasons: list[SkipReasonSummary] = field(default_factory=list[SkipReasonSummary])

    def note_skip(self, code: SkipCode, candidate_id: str) -> None:
        """Tally ``code`` keeping up to a handful of sample candidate ids."""

        summary = next((item for item in self.skip_reasons if item.code == code), None)
        if summary is None:
            summary = SkipReasonSummary(code)
            self.skip_reasons.append(summary)
        summary.count += 1
        if len(summary.sample_candidate_ids) < MAX_SKIP_SAMPLES:
            summary.sample_candidate_ids.append(candidate_id)
