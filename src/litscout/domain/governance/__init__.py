"""Publish gate and daily governance caps."""

from __future__ import annotations

from .caps import (
    CapCheck,
    TrustDeltaCheck,
    check_daily_constraint_edge_cap,
    check_daily_hypothesis_cap,
    check_daily_node_cap,
    check_daily_trust_delta,
)
from .hypotheses import validate_hypotheses
from .publish_gate import (
    NodeDraft,
    PublishGateResult,
    ReferenceDraft,
    ValidationMessages,
    run_publish_gate,
    validate_node,
    validate_reference,
)
from .report import GovernanceReport, build_governance_report

__all__ = [
    "CapCheck",
    "GovernanceReport",
    "NodeDraft",
    "PublishGateResult",
    "ReferenceDraft",
    "TrustDeltaCheck",
    "ValidationMessages",
    "build_governance_report",
    "check_daily_constraint_edge_cap",
    "check_daily_hypothesis_cap",
    "check_daily_node_cap",
    "check_daily_trust_delta",
    "run_publish_gate",
    "validate_hypotheses",
    "validate_node",
    "validate_reference",
]
