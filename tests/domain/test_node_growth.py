from __future__ import annotations

from litscout.domain.node_growth import (
    NodeGrowthPolicy,
    choose_parent,
    derive_node_keywords,
    derive_node_name,
    find_node_duplicate,
)
from litscout.domain.scope import CandidateText
from tests.helpers.factories import make_event, make_graph, make_node


def test_node_name_uses_title_head_before_colon() -> None:
    assert derive_node_name("Ganzfeld studies: a systematic review") == "Ganzfeld studies"


def test_short_title_head_keeps_full_title() -> None:
    assert derive_node_name("Psi:  the review of things") == "Psi: the review of things"


def test_long_title_is_truncated_at_word_boundary() -> None:
    title = " ".join(["telepathy"] * 15)

    assert derive_node_name(title) == " ".join(["telepathy"] * 10)


def test_keywords_start_with_matched_scope_keywords_and_skip_stopwords() -> None:
    keywords = derive_node_keywords("Remote viewing through the ganzfeld", ("psi",))

    assert keywords == ["psi", "remote", "viewing", "ganzfeld"]


def test_keywords_are_capped() -> None:
    keywords = derive_node_keywords("alpha bravo charlie delta", (), max_keywords=2)

    assert keywords == ["alpha", "bravo"]


def test_duplicate_by_exact_name() -> None:
    nodes = [make_node("P2", "Ganzfeld")]

    duplicate = find_node_duplicate("ganzfeld", [], nodes, NodeGrowthPolicy())

    assert duplicate is not None
    assert duplicate.rule == "exact-name"
    assert duplicate.node_id == "P2"


def test_duplicate_by_alias_overlap() -> None:
    nodes = [make_node("P2", "Ganzfeld telepathy", keywords=["research"])]

    duplicate = find_node_duplicate("Telepathy research", ["ganzfeld"], nodes, NodeGrowthPolicy())

    assert duplicate is not None
    assert duplicate.rule == "alias-overlap"
    assert duplicate.score == 1.0


def test_duplicate_by_name_similarity() -> None:
    nodes = [make_node("P2", "Ganzfeld study")]

    duplicate = find_node_duplicate("Ganzfeld studies", [], nodes, NodeGrowthPolicy())

    assert duplicate is not None
    assert duplicate.rule == "name-similarity"
    assert duplicate.score >= 0.82


def test_unrelated_name_is_not_duplicate() -> None:
    nodes = [make_node("P2", "Ganzfeld")]

    assert find_node_duplicate("Precognition", ["dreams"], nodes, NodeGrowthPolicy()) is None


def test_choose_parent_prefers_best_linked_node() -> None:
    graph = make_graph(
        make_node("P2", "Ganzfeld", keywords=["telepathy"]),
        make_node("P3", "Dream research"),
    )
    text = CandidateText.from_event(
        make_event(title="Ganzfeld telepathy meta-analysis", query="ganzfeld")
    )

    parent = choose_parent(text, graph.nodes, graph.root_id)

    assert parent is not None
    assert parent.node.id == "P2"
    assert parent.link_score == 4


def test_choose_parent_falls_back_to_root() -> None:
    graph = make_graph()
    text = CandidateText.from_event(make_event(title="Unrelated", query="nothing"))

    parent = choose_parent(text, graph.nodes, graph.root_id)

    assert parent is not None
    assert parent.node.id == graph.root_id
    assert parent.link_score == 0
    assert choose_parent(text, [], graph.root_id) is None
