"""Helpers for proposing new graph nodes from imported candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rapidfuzz import fuzz

from litscout.domain.model import ReviewStatus

from .scope import node_link_score
from .text import jaccard, normalize_text, token_set, tokenize

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litscout.domain.model import GraphNode

    from .scope import CandidateText

MIN_NAME_SEGMENT_LENGTH = 8
MAX_NODE_NAME_LENGTH = 100
MAX_NODE_KEYWORDS = 12

STOPWORDS = frozenset(
    {
        "about",
        "after",
        "against",
        "among",
        "based",
        "before",
        "being",
        "between",
        "does",
        "during",
        "from",
        "have",
        "into",
        "more",
        "other",
        "over",
        "some",
        "such",
        "than",
        "that",
        "their",
        "there",
        "these",
        "they",
        "this",
        "through",
        "toward",
        "towards",
        "under",
        "upon",
        "using",
        "versus",
        "were",
        "what",
        "when",
        "where",
        "which",
        "while",
        "with",
        "within",
        "without",
    }
)


@dataclass(frozen=True, slots=True, kw_only=True)
class NodeGrowthPolicy:
    enabled: bool = False
    max_new_nodes: int = 5
    min_node_confidence: float = 0.6
    alias_overlap_threshold: float = 0.8
    name_similarity_threshold: float = 0.82
    max_keywords: int = MAX_NODE_KEYWORDS
    review_status: ReviewStatus = ReviewStatus.APPROVED


@dataclass(frozen=True, slots=True)
class ParentChoice:
    node: GraphNode
    link_score: int


@dataclass(frozen=True, slots=True)
class NodeDuplicate:
    node_id: str
    rule: str
    score: float


def choose_parent(
    text: CandidateText, nodes: Sequence[GraphNode], root_id: str
) -> ParentChoice | None:
    """Best-linked non-root node, or the root when nothing links at all."""

    best: ParentChoice | None = None
    root: GraphNode | None = None
    for node in nodes:
        if node.id == root_id:
            root = node
            continue
        score = node_link_score(text, node)
        if score > 0 and (best is None or score > best.link_score):
            best = ParentChoice(node, score)
    if best is not None:
        return best
    return ParentChoice(root, 0) if root is not None else None


def derive_node_name(title: str) -> str:
    title = " ".join(title.split())
    head, sep, _ = title.partition(":")
    head = head.strip()
    if sep and MIN_NAME_SEGMENT_LENGTH <= len(head) <= MAX_NODE_NAME_LENGTH:
        return head
    return truncate_at_word(title, MAX_NODE_NAME_LENGTH)


def truncate_at_word(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    cut = text[:limit]
    boundary = cut.rfind(" ")
    return cut[:boundary].rstrip() if boundary > 0 else cut


def derive_node_keywords(
    title: str, matched_scope_keywords: Sequence[str], *, max_keywords: int = MAX_NODE_KEYWORDS
) -> list[str]:
    keywords: list[str] = []
    for keyword in (*matched_scope_keywords, *tokenize(title)):
        if keyword in STOPWORDS or keyword in keywords:
            continue
        keywords.append(keyword)
    return keywords[:max_keywords]


def name_similarity(left: str, right: str) -> float:
    return fuzz.ratio(normalize_text(left), normalize_text(right)) / 100


def find_node_duplicate(
    name: str,
    keywords: Sequence[str],
    nodes: Sequence[GraphNode],
    policy: NodeGrowthPolicy,
) -> NodeDuplicate | None:
    normalized = normalize_text(name)
    aliases = token_set(name, " ".join(keywords))
    for node in nodes:
        if normalized and normalize_text(node.name) == normalized:
            return NodeDuplicate(node.id, "exact-name", 1.0)
        overlap = jaccard(aliases, token_set(node.name, " ".join(node.keywords)))
        if overlap >= policy.alias_overlap_threshold:
            return NodeDuplicate(node.id, "alias-overlap", overlap)
        similarity = name_similarity(name, node.name)
        if similarity >= policy.name_similarity_threshold:
            return NodeDuplicate(node.id, "name-similarity", similarity)
    return None


def describe_node(title: str, query: str) -> str:
    return f'Auto-generated from discovery candidate "{title}" (query "{query}")'
