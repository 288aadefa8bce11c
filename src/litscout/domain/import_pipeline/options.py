"""Options controlling one import run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litscout.domain.confidence import DEFAULT_WEIGHTS, ConfidenceWeights
from litscout.domain.model import ReviewStatus
from litscout.domain.node_growth import NodeGrowthPolicy
from litscout.domain.scope import DEFAULT_MAX_LINKED_NODES, ScopePolicy

if TYPE_CHECKING:
    from datetime import date

DEFAULT_MAX_ITEMS = 20


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportOptions:
    run_id: str
    review_status: ReviewStatus = ReviewStatus.DRAFT
    source_run_id: str | None = None
    date: date | None = None
    max_items: int = DEFAULT_MAX_ITEMS
    max_linked_nodes: int = DEFAULT_MAX_LINKED_NODES
    enforce_scope_filter: bool = True
    scope: ScopePolicy = field(default_factory=ScopePolicy)
    node_growth: NodeGrowthPolicy = field(default_factory=NodeGrowthPolicy)
    confidence_weights: ConfidenceWeights = DEFAULT_WEIGHTS
