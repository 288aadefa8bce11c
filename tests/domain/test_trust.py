from __future__ import annotations

import pytest

from litscout.domain.model import UNCLASSIFIED_TRUST, GraphEdge
from litscout.domain.trust import propagate_trust
from tests.helpers.factories import make_graph, make_node


def _edge(source: str, target: str, trust: float) -> GraphEdge:
    return GraphEdge(id=f"{source}-{target}", source_id=source, target_id=target, trust=trust)


def test_child_takes_best_path() -> None:
    graph = make_graph(make_node("P2", "A"), make_node("P3", "B"), make_node("P4", "Orphan"))
    edges = [_edge("P1", "P2", 0.8), _edge("P2", "P3", 0.5), _edge("P1", "P3", 0.3)]

    nodes, new_edges = propagate_trust(graph.nodes, edges, graph.root_id)
    trust = {node.id: node.trust for node in nodes}

    assert trust["P1"] == 1.0
    assert trust["P2"] == pytest.approx(0.8)
    assert trust["P3"] == pytest.approx(0.4)
    assert trust["P4"] == UNCLASSIFIED_TRUST
    assert [edge.combined_trust for edge in new_edges] == pytest.approx([0.8, 0.4, 0.3])


def test_unclassified_edge_does_not_carry_trust() -> None:
    graph = make_graph(make_node("P2", "A"))

    nodes, edges = propagate_trust(
        graph.nodes, [_edge("P1", "P2", UNCLASSIFIED_TRUST)], graph.root_id
    )

    assert nodes[1].trust == UNCLASSIFIED_TRUST
    assert edges[0].combined_trust == UNCLASSIFIED_TRUST


def test_cycles_terminate() -> None:
    graph = make_graph(make_node("P2", "A"))
    edges = [_edge("P1", "P2", 0.5), _edge("P2", "P1", 1.0)]

    nodes, _ = propagate_trust(graph.nodes, edges, graph.root_id)

    assert [node.trust for node in nodes] == pytest.approx([1.0, 0.5])


def test_inputs_are_left_untouched() -> None:
    graph = make_graph(make_node("P2", "A", trust=0.1))
    edges = [_edge("P1", "P2", 0.9)]

    propagate_trust(graph.nodes, edges, graph.root_id)

    assert graph.nodes[1].trust == 0.1
    assert edges[0].combined_trust == UNCLASSIFIED_TRUST


def test_missing_root_leaves_everything_unclassified() -> None:
    graph = make_graph(make_node("P2", "A"))

    nodes, _ = propagate_trust(graph.nodes, [], "P9")

    assert {node.trust for node in nodes} == {UNCLASSIFIED_TRUST}
