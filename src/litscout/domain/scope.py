"""Scope classification of discovery candidates against the current graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from litscout.domain.model import ScopeClassification

from .text import normalize_text, token_set, unique_normalized

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from litscout.domain.model import DiscoveryEvent, GraphNode

DEFAULT_MIN_SCOPE_SCORE = 2
DEFAULT_MAX_LINKED_NODES = 2
MIN_LINK_SCORE = 2


@dataclass(frozen=True, slots=True, kw_only=True)
class ScopePolicy:
    scope_keywords: tuple[str, ...] = ()
    exclude_keywords: tuple[str, ...] = ()
    min_scope_score: int = DEFAULT_MIN_SCOPE_SCORE
    keyword_weight: int = 2
    node_overlap_cap: int = 3
    core_margin: int = 2

    def __post_init__(self) -> None:
        object.__setattr__(self, "scope_keywords", unique_normalized(self.scope_keywords))
        object.__setattr__(self, "exclude_keywords", unique_normalized(self.exclude_keywords))


@dataclass(frozen=True, slots=True)
class CandidateText:
    """Normalized query, title and abstract of a candidate."""

    corpus: str
    tokens: frozenset[str]

    @classmethod
    def from_event(cls, event: DiscoveryEvent) -> CandidateText:
        corpus = normalize_text(" ".join((event.query, event.title, event.abstract or "")))
        return cls(corpus=corpus, tokens=token_set(corpus))

    def matched(self, keywords: Iterable[str]) -> tuple[str, ...]:
        return tuple(keyword for keyword in keywords if keyword in self.corpus)


@dataclass(frozen=True, slots=True)
class ScopeAssessment:
    classification: ScopeClassification
    scope_score: int
    reason: str | None = None
    matched_keywords: tuple[str, ...] = ()
    best_node_score: int = 0


def node_link_score(text: CandidateText, node: GraphNode) -> int:
    """+2 when the node name and the corpus contain one another, +1 per shared token."""

    score = 0
    name = normalize_text(node.name)
    if name and text.corpus and (name in text.corpus or text.corpus in name):
        score += 2
    node_tokens = token_set(node.name, " ".join(node.keywords))
    score += len(node_tokens & text.tokens)
    return score


def scored_nodes(
    text: CandidateText, nodes: Sequence[GraphNode], root_id: str
) -> list[tuple[GraphNode, int]]:
    """Link scores for every non-root node, best first (stable for ties)."""

    scored = [(node, node_link_score(text, node)) for node in nodes if node.id != root_id]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored


def suggest_node_links(
    text: CandidateText,
    nodes: Sequence[GraphNode],
    root_id: str,
    *,
    max_linked_nodes: int = DEFAULT_MAX_LINKED_NODES,
) -> list[str]:
    ranked = [
        node.id for node, score in scored_nodes(text, nodes, root_id) if score >= MIN_LINK_SCORE
    ]
    return ranked[: max(0, max_linked_nodes)]


def classify_scope(
    text: CandidateText,
    nodes: Sequence[GraphNode],
    root_id: str,
    policy: ScopePolicy,
) -> ScopeAssessment:
    matched_scope = text.matched(policy.scope_keywords)
    matched_exclude = text.matched(policy.exclude_keywords)
    ranked = scored_nodes(text, nodes, root_id)
    best_node_score = ranked[0][1] if ranked else 0

    score = policy.keyword_weight * len(matched_scope) + min(
        policy.node_overlap_cap, best_node_score
    )
    if matched_exclude:
        return ScopeAssessment(
            ScopeClassification.OUT_OF_SCOPE,
            score,
            reason=f"matched exclude keywords: {', '.join(matched_exclude)}",
            matched_keywords=matched_scope,
            best_node_score=best_node_score,
        )
    if score >= policy.min_scope_score + policy.core_margin:
        classification = ScopeClassification.CORE
    elif score >= policy.min_scope_score:
        classification = ScopeClassification.ADJACENT
    else:
        return ScopeAssessment(
            ScopeClassification.OUT_OF_SCOPE,
            score,
            reason=f"scope score {score} below minimum {policy.min_scope_score}",
            matched_keywords=matched_scope,
            best_node_score=best_node_score,
        )
    return ScopeAssessment(
        classification, score, matched_keywords=matched_scope, best_node_score=best_node_score
    )
