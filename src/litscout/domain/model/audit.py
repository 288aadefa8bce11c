"""Audit records for pipeline decisions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import EntityKind, ScopeClassification, ValidationOutcome

type Snapshot = dict[str, Any]


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEntry:
    """Why a particular accept/reject decision was made."""

    timestamp: datetime
    run_id: str
    action: str
    entity_type: EntityKind
    entity_id: str
    validation_outcome: ValidationOutcome
    before: Snapshot | None = None
    after: Snapshot | None = None
    reason: str | None = None
    ai_rationale: str | None = None
    validation_errors: tuple[str, ...] = ()
    source_apis: tuple[str, ...] | None = None
    ai_classification: ScopeClassification | None = None
    mapping_confidence: float | None = None