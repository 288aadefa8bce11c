"""Candidate event log: identity, latest-state reduction and transitions."""

from __future__ import annotations

from .identity import (
    abstract_checksum,
    compute_candidate_id,
    create_discovery_event,
    decision_for_search_result,
)
from .log import MANUAL_RETRY_REASON, DerivedDiscoveryState, DiscoveryLog
from .reducer import latest_by_candidate, matches_filters

__all__ = [
    "MANUAL_RETRY_REASON",
    "DerivedDiscoveryState",
    "DiscoveryLog",
    "abstract_checksum",
    "compute_candidate_id",
    "create_discovery_event",
    "decision_for_search_result",
    "latest_by_candidate",
    "matches_filters",
]
