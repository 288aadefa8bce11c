from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from litscout.domain.governance import (
    check_daily_constraint_edge_cap,
    check_daily_hypothesis_cap,
    check_daily_node_cap,
    check_daily_trust_delta,
)
from litscout.domain.model import (
    AuditEntry,
    EdgeType,
    EntityKind,
    GraphEdge,
    Hypothesis,
    Provenance,
    ValidationOutcome,
)
from tests.helpers.factories import NOON, make_node

TODAY = NOON.date()
YESTERDAY = NOON - timedelta(days=1)


def _edge(edge_id: str, edge_type: EdgeType, created_at: datetime = NOON) -> GraphEdge:
    return GraphEdge(
        id=edge_id,
        source_id="P1",
        target_id="P2",
        type=edge_type,
        provenance=Provenance(timestamp=created_at),
    )


def _trust_entry(action: str, before: object, after: object, node_id: str = "P2") -> AuditEntry:
    return AuditEntry(
        timestamp=NOON,
        run_id="run",
        action=action,
        entity_type=EntityKind.NODE,
        entity_id=node_id,
        validation_outcome=ValidationOutcome.ACCEPTED,
        before={"trust": before},
        after={"trust": after},
    )


def test_node_cap_counts_nodes_created_today() -> None:
    nodes = [
        make_node("P2", "A", created_at=NOON),
        make_node("P3", "B", created_at=NOON),
        make_node("P4", "C", created_at=YESTERDAY),
        make_node("P5", "D"),
    ]

    reached = check_daily_node_cap(nodes, 2, TODAY)
    open_cap = check_daily_node_cap(nodes, 3, TODAY)

    assert reached.today_count == 2
    assert not reached.within_cap
    assert reached.remaining == 0
    assert open_cap.within_cap
    assert open_cap.remaining == 1


def test_hypothesis_cap() -> None:
    hypotheses = [
        Hypothesis(id="H1", statement="a", created_at=NOON),
        Hypothesis(id="H2", statement="b", created_at=YESTERDAY),
        Hypothesis(id="H3", statement="c"),
    ]

    check = check_daily_hypothesis_cap(hypotheses, 1, TODAY)

    assert check.today_count == 1
    assert not check.within_cap


def test_constraint_edge_cap_ignores_classic_edges() -> None:
    edges = [
        _edge("e1", EdgeType.REQUIRES),
        _edge("e2", EdgeType.FAILS_WHEN),
        _edge("e3", EdgeType.IMPLICATION),
        _edge("e4", EdgeType.CONFOUNDED_BY, created_at=YESTERDAY),
    ]

    check = check_daily_constraint_edge_cap(edges, 5, TODAY)

    assert check.today_count == 2
    assert check.remaining == 3


def test_trust_delta_sums_trust_affecting_actions() -> None:
    entries = [
        _trust_entry("update-trust", 0.2, 0.9),
        _trust_entry("trust-propagation", 0.9, 0.1),
        _trust_entry("rename", 0.0, 1.0),
        _trust_entry("update-trust", 0.0, 1.0, node_id="P3"),
        _trust_entry("update-trust", True, 0.5),
    ]

    check = check_daily_trust_delta("P2", entries, 1.0)

    assert check.total_delta == pytest.approx(2.0)
    assert not check.within_limit


def test_trust_delta_within_limit() -> None:
    check = check_daily_trust_delta("P2", [_trust_entry("update-trust", 0.5, 0.7)], 2.0)

    assert check.within_limit
    assert check.total_delta == pytest.approx(0.2)
