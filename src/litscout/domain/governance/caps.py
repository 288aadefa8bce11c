"""Daily governance caps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from litscout.domain.clock import utc_date
from litscout.domain.model import CONSTRAINT_EDGE_TYPES, TRUST_AFFECTING_ACTIONS

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, datetime

    from litscout.domain.model import AuditEntry, GraphEdge, GraphNode, Hypothesis, Snapshot


@dataclass(frozen=True, slots=True)
class CapCheck:
    within_cap: bool
    today_count: int
    remaining: int


@dataclass(frozen=True, slots=True)
class TrustDeltaCheck:
    within_limit: bool
    total_delta: float


def _created_on(timestamp: datetime | None, today: date) -> bool:
    return timestamp is not None and utc_date(timestamp) == today


def _cap_check(today_count: int, cap: int) -> CapCheck:
    return CapCheck(
        within_cap=today_count < cap,
        today_count=today_count,
        remaining=max(0, cap - today_count),
    )


def check_daily_node_cap(nodes: Iterable[GraphNode], cap: int, today: date) -> CapCheck:
    count = sum(
        1 for node in nodes if node.provenance and _created_on(node.provenance.timestamp, today)
    )
    return _cap_check(count, cap)


def check_daily_hypothesis_cap(
    hypotheses: Iterable[Hypothesis], cap: int, today: date
) -> CapCheck:
    count = sum(1 for hypothesis in hypotheses if _created_on(hypothesis.created_at, today))
    return _cap_check(count, cap)


def check_daily_constraint_edge_cap(edges: Iterable[GraphEdge], cap: int, today: date) -> CapCheck:
    count = sum(
        1
        for edge in edges
        if edge.type in CONSTRAINT_EDGE_TYPES
        and edge.provenance is not None
        and _created_on(edge.provenance.timestamp, today)
    )
    return _cap_check(count, cap)


def _trust(snapshot: Snapshot | None) -> float:
    if not snapshot:
        return 0.0
    value = snapshot.get("trust")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    return float(value)


def check_daily_trust_delta(
    node_id: str, entries: Iterable[AuditEntry], max_delta: float
) -> TrustDeltaCheck:
    """Sum absolute trust changes recorded for ``node_id`` by trust-affecting actions."""

    total = 0.0
    for entry in entries:
        if entry.entity_id != node_id or entry.action not in TRUST_AFFECTING_ACTIONS:
            continue
        total += abs(_trust(entry.after) - _trust(entry.before))
    return TrustDeltaCheck(within_limit=total <= max_delta, total_delta=total)
