from __future__ import annotations

from datetime import timedelta

from litscout.config import GovernanceConfig
from litscout.domain.governance import build_governance_report, validate_hypotheses
from litscout.domain.model import (
    AuditEntry,
    EdgeType,
    EntityKind,
    GraphData,
    GraphEdge,
    Hypothesis,
    Provenance,
    ValidationOutcome,
)
from tests.helpers.factories import NOON, make_graph, make_node, make_reference

TODAY = NOON.date()


def _clean_graph() -> GraphData:
    graph = make_graph(make_node("P2", "Ganzfeld"))
    graph.nodes[0].description = "Root of the graph"
    graph.references.append(make_reference("ref-1"))
    return graph


def test_hypothesis_errors_and_warnings(governance: GovernanceConfig) -> None:
    hypotheses = [
        Hypothesis(id="H1", statement=" ", support_ref_ids=["ref-1"]),
        Hypothesis(id="H2", statement="Psi exists"),
        Hypothesis(id="H3", statement="Dreams", support_ref_ids=["missing"]),
        Hypothesis(
            id="H4", statement="Ganzfeld", support_ref_ids=["ref-1"], contradict_ref_ids=["gone"]
        ),
    ]

    messages = validate_hypotheses(hypotheses, [make_reference("ref-1")], governance)

    assert messages.errors == [
        "Hypothesis H1: statement is empty",
        "Hypothesis H2: requires at least one supporting reference",
        "Hypothesis H3: support ref not found (missing)",
    ]
    assert messages.warnings == ["Hypothesis H4: contradict ref not found (gone)"]


def test_duplicate_hypothesis_statements(governance: GovernanceConfig) -> None:
    hypotheses = [
        Hypothesis(id="H1", statement="Telepathy  exists", support_ref_ids=["ref-1"]),
        Hypothesis(id="H2", statement="telepathy exists", support_ref_ids=["ref-1"]),
    ]

    messages = validate_hypotheses(hypotheses, [make_reference("ref-1")], governance)
    relaxed = validate_hypotheses(
        hypotheses, [make_reference("ref-1")], governance.with_overrides(duplicate_rejection=False)
    )

    assert messages.errors == ['Duplicate hypothesis statements (H1, H2): "telepathy exists"']
    assert relaxed.errors == []


def test_evidence_requirement_can_be_disabled(governance: GovernanceConfig) -> None:
    config = governance.with_overrides(require_hypothesis_evidence=False)

    messages = validate_hypotheses([Hypothesis(id="H1", statement="Psi")], [], config)

    assert messages.errors == []


def test_clean_graph_is_valid(governance: GovernanceConfig) -> None:
    report = build_governance_report(_clean_graph(), governance, TODAY)

    assert report.valid
    assert report.errors == []
    assert report.node_cap.today_count == 0


def test_hypothesis_cap_is_advisory(governance: GovernanceConfig) -> None:
    graph = _clean_graph()
    graph.hypotheses = [
        Hypothesis(
            id=f"H{i}", statement=f"Statement {i}", support_ref_ids=["ref-1"], created_at=NOON
        )
        for i in range(2)
    ]
    config = governance.with_overrides(max_daily_new_hypotheses=1)

    report = build_governance_report(graph, config, TODAY)

    assert report.valid
    assert report.warnings == ["Daily hypothesis cap reached (advisory): 2/1"]


def test_constraint_edge_cap_blocks(governance: GovernanceConfig) -> None:
    graph = _clean_graph()
    graph.edges.append(
        GraphEdge(
            id="P1-P2",
            source_id="P1",
            target_id="P2",
            type=EdgeType.INCOMPATIBLE_WITH,
            provenance=Provenance(timestamp=NOON),
        )
    )
    config = governance.with_overrides(max_daily_constraint_edges=1)

    report = build_governance_report(graph, config, TODAY)

    assert not report.valid
    assert report.errors == ["Daily constraint-edge cap exceeded: 1/1"]


def test_trust_delta_is_reported_as_warning(governance: GovernanceConfig) -> None:
    entry = AuditEntry(
        timestamp=NOON,
        run_id="run",
        action="update-trust",
        entity_type=EntityKind.NODE,
        entity_id="P2",
        validation_outcome=ValidationOutcome.ACCEPTED,
        before={"trust": 0.0},
        after={"trust": 1.0},
    )
    config = governance.with_overrides(max_daily_trust_delta=0.5)

    report = build_governance_report(_clean_graph(), config, TODAY, [entry])

    assert report.valid
    assert report.warnings == ['Node "Ganzfeld": daily trust delta 1.00 exceeds 0.50']


def test_yesterdays_creations_do_not_count(governance: GovernanceConfig) -> None:
    graph = _clean_graph()
    graph.nodes.append(make_node("P3", "Old", created_at=NOON - timedelta(days=1)))

    report = build_governance_report(graph, governance, TODAY)

    assert report.node_cap.today_count == 0
