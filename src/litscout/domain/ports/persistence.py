"""Ports for the append-only discovery and audit logs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import date

    from litscout.domain.model import AuditEntry, DiscoveryEvent


@runtime_checkable
class DiscoveryEventStore(Protocol):
    """Append-only store of discovery events partitioned by UTC date.

    ``read_*`` methods return events in append order; unreadable partitions come back
    empty rather than raising.
    """

    def write(self, event: DiscoveryEvent) -> None: ...

    def read_by_date(self, day: date) -> list[DiscoveryEvent]: ...

    def read_all(self) -> list[DiscoveryEvent]: ...

    def list_dates(self) -> list[date]: ...


@runtime_checkable
class AuditEntryStore(Protocol):
    """Append-only store of audit entries partitioned by UTC date."""

    def write(self, entry: AuditEntry) -> None: ...

    def read_by_date(self, day: date) -> list[AuditEntry]: ...

    def list_dates(self) -> list[date]: ...


__all__ = ["AuditEntryStore", "DiscoveryEventStore"]
