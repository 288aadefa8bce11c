"""Audit trail: durable provenance of every accept/reject decision."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litscout.domain.clock import utc_date, utc_now
from litscout.domain.model import AuditEntry

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from litscout.domain.clock import Clock
    from litscout.domain.model import (
        EntityKind,
        ScopeClassification,
        Snapshot,
        ValidationOutcome,
    )
    from litscout.domain.ports import AuditEntryStore


class AuditTrail:
    def __init__(self, store: AuditEntryStore, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def record(self, entry: AuditEntry) -> AuditEntry:
        self._store.write(entry)
        return entry

    def entry(
        self,
        *,
        run_id: str,
        action: str,
        entity_type: EntityKind,
        entity_id: str,
        outcome: ValidationOutcome,
        after: Snapshot | None,
        before: Snapshot | None = None,
        reason: str | None = None,
        ai_rationale: str | None = None,
        validation_errors: Sequence[str] = (),
        source_apis: Sequence[str] | None = None,
        ai_classification: ScopeClassification | None = None,
        mapping_confidence: float | None = None,
    ) -> AuditEntry:
        """Build an entry stamped with the current time and record it."""

        return self.record(
            AuditEntry(
                timestamp=self._clock(),
                run_id=run_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                validation_outcome=outcome,
                before=before,
                after=after,
                reason=reason,
                ai_rationale=ai_rationale,
                validation_errors=tuple(validation_errors),
                source_apis=tuple(source_apis) if source_apis is not None else None,
                ai_classification=ai_classification,
                mapping_confidence=mapping_confidence,
            )
        )

    def for_date(self, day: date) -> list[AuditEntry]:
        return self._store.read_by_date(day)

    def today(self) -> list[AuditEntry]:
        return self._store.read_by_date(utc_date(self._clock()))

    def dates(self) -> list[date]:
        return self._store.list_dates()

    def for_entity(self, entity_id: str, day: date | None = None) -> list[AuditEntry]:
        entries = self.for_date(day) if day is not None else self.today()
        return [entry for entry in entries if entry.entity_id == entity_id]


def snapshot(**values: Any) -> Snapshot:
    """Drop ``None`` values so snapshots stay compact in the log."""

    return {key: value for key, value in values.items() if value is not None}
