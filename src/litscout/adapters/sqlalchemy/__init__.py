"""SQLAlchemy adapter package for litscout."""

from __future__ import annotations

from .discovery_store import SqlAlchemyDiscoveryEventStore, StartupError, startup
from .mappings import UTCDateTime, create_all_tables, discovery_event_table, metadata

__all__ = [
    "SqlAlchemyDiscoveryEventStore",
    "StartupError",
    "UTCDateTime",
    "create_all_tables",
    "discovery_event_table",
    "metadata",
    "startup",
]
