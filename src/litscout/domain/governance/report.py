"""Whole-graph governance report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .caps import (
    CapCheck,
    check_daily_constraint_edge_cap,
    check_daily_hypothesis_cap,
    check_daily_node_cap,
    check_daily_trust_delta,
)
from .hypotheses import validate_hypotheses
from .publish_gate import NodeDraft, ReferenceDraft, run_publish_gate

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from litscout.config import GovernanceConfig
    from litscout.domain.model import AuditEntry, GraphData


@dataclass(slots=True)
class GovernanceReport:
    node_cap: CapCheck
    hypothesis_cap: CapCheck
    constraint_edge_cap: CapCheck
    errors: list[str] = field(default_factory=list[str])
    warnings: list[str] = field(default_factory=list[str])

    @property
    def valid(self) -> bool:
        return not self.errors


def build_governance_report(
    graph: GraphData,
    config: GovernanceConfig,
    today: date,
    audit_entries: Sequence[AuditEntry] = (),
) -> GovernanceReport:
    """Validate every node, reference and hypothesis of ``graph`` against ``config``.

    The hypothesis daily cap is advisory and only ever produces a warning; the
    constraint-edge cap and the publish gate's node cap block. Nodes whose trust moved
    more than the daily limit according to ``audit_entries`` are reported as warnings.
    """

    gate = run_publish_gate(
        nodes=[NodeDraft(id=n.id, name=n.name, description=n.description) for n in graph.nodes],
        references=[
            ReferenceDraft(
                id=ref.id,
                title=ref.title,
                authors=tuple(ref.authors),
                year=ref.year,
                doi=ref.doi,
                url=ref.url,
                semantic_scholar_id=ref.semantic_scholar_id,
                open_alex_id=ref.open_alex_id,
            )
            for ref in graph.references
        ],
        existing_nodes=graph.nodes,
        existing_references=graph.references,
        config=config,
        today=today,
    )
    hypotheses = validate_hypotheses(graph.hypotheses, graph.references, config)

    report = GovernanceReport(
        node_cap=check_daily_node_cap(graph.nodes, config.max_daily_new_nodes, today),
        hypothesis_cap=check_daily_hypothesis_cap(
            graph.hypotheses, config.max_daily_new_hypotheses, today
        ),
        constraint_edge_cap=check_daily_constraint_edge_cap(
            graph.edges, config.max_daily_constraint_edges, today
        ),
        errors=[*gate.errors, *hypotheses.errors],
        warnings=[*gate.warnings, *hypotheses.warnings],
    )
    if not report.hypothesis_cap.within_cap:
        report.warnings.append(
            "Daily hypothesis cap reached (advisory): "
            f"{report.hypothesis_cap.today_count}/{config.max_daily_new_hypotheses}"
        )
    if not report.constraint_edge_cap.within_cap:
        report.errors.append(
            "Daily constraint-edge cap exceeded: "
            f"{report.constraint_edge_cap.today_count}/{config.max_daily_constraint_edges}"
        )
    for node in graph.nodes:
        delta = check_daily_trust_delta(node.id, audit_entries, config.max_daily_trust_delta)
        if not delta.within_limit:
            report.warnings.append(
                f'Node "{node.name}": daily trust delta {delta.total_delta:.2f} exceeds '
                f"{config.max_daily_trust_delta:.2f}"
            )
    return report
