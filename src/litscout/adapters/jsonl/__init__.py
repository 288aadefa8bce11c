"""JSON Lines adapters for the discovery and audit logs."""

from __future__ import annotations

from .audit_store import AUDIT_FILENAME, JsonlAuditEntryStore
from .discovery_store import CANDIDATES_FILENAME, JsonlDiscoveryEventStore
from .partitions import PartitionRead

__all__ = [
    "AUDIT_FILENAME",
    "CANDIDATES_FILENAME",
    "JsonlAuditEntryStore",
    "JsonlDiscoveryEventStore",
    "PartitionRead",
]
