"""Confidence that a candidate deserves its own graph node."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litscout.domain.model import ScopeClassification

from .text import jaccard, token_set

if TYPE_CHECKING:
    from litscout.domain.model import GraphNode

    from .scope import CandidateText, ScopeAssessment

_PRECISION = 6


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfidenceWeights:
    scope: float = 0.35
    parent: float = 0.25
    lexical: float = 0.25
    keyword: float = 0.15

    # used when an out-of-scope candidate reaches node growth
    weak_parent: float = 0.45
    weak_lexical: float = 0.45
    weak_keyword: float = 0.10
    weak_scope_penalty: float = 0.85
    weak_threshold_raise: float = 0.1

    scope_normalizer: float = 6.0
    parent_normalizer: float = 5.0


DEFAULT_WEIGHTS = ConfidenceWeights()


@dataclass(frozen=True, slots=True)
class ConfidenceSignals:
    scope: float
    parent: float
    lexical: float
    keyword: float


@dataclass(frozen=True, slots=True)
class NodeConfidence:
    confidence: float
    threshold: float
    weak_scope: bool
    signals: ConfidenceSignals = field(repr=False)

    @property
    def accepted(self) -> bool:
        return self.confidence >= self.threshold

    def skip_reason(self) -> str:
        return f"low-node-confidence:{self.confidence:.2f}<{self.threshold:.2f}"


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def confidence_signals(
    *,
    text: CandidateText,
    title: str,
    scope: ScopeAssessment,
    parent: GraphNode | None,
    parent_link_score: int,
    scope_keywords: tuple[str, ...],
    weights: ConfidenceWeights = DEFAULT_WEIGHTS,
) -> ConfidenceSignals:
    parent_tokens = token_set(parent.name, " ".join(parent.keywords)) if parent else frozenset()
    coverage = len(text.matched(scope_keywords)) / len(scope_keywords) if scope_keywords else 0.0
    return ConfidenceSignals(
        scope=_clamp(scope.scope_score / weights.scope_normalizer),
        parent=_clamp(parent_link_score / weights.parent_normalizer),
        lexical=jaccard(token_set(title), parent_tokens),
        keyword=_clamp(coverage),
    )


def score_node_confidence(
    signals: ConfidenceSignals,
    classification: ScopeClassification,
    min_node_confidence: float,
    weights: ConfidenceWeights = DEFAULT_WEIGHTS,
) -> NodeConfidence:
    """Combine the signals into one confidence and the threshold it must reach.

    Values are rounded so a confidence computed to sit exactly on the threshold is
    accepted regardless of floating point noise.
    """

    weak_scope = classification is ScopeClassification.OUT_OF_SCOPE
    if weak_scope:
        raw = (
            weights.weak_parent * signals.parent
            + weights.weak_lexical * signals.lexical
            + weights.weak_keyword * signals.keyword
        ) * weights.weak_scope_penalty
        threshold = min_node_confidence + weights.weak_threshold_raise
    else:
        raw = (
            weights.scope * signals.scope
            + weights.parent * signals.parent
            + weights.lexical * signals.lexical
            + weights.keyword * signals.keyword
        )
        threshold = min_node_confidence
    return NodeConfidence(
        confidence=round(raw, _PRECISION),
        threshold=round(threshold, _PRECISION),
        weak_scope=weak_scope,
        signals=signals,
    )
