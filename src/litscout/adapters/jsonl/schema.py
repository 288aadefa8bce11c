"""Pydantic models describing the JSON Lines log records."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from litscout.domain.model import (  # noqa: TC001
    Decision,
    DiscoveryAction,
    EntityKind,
    ScopeClassification,
    ValidationOutcome,
)


class LogRecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_line(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class DiscoveryEventRecord(LogRecordModel):
    candidate_id: str
    timestamp: datetime
    action: DiscoveryAction
    source: str
    discovered_at: datetime
    query: str
    title: str
    authors: list[str] = []
    year: int | None = None
    doi: str | None = None
    url: str | None = None
    abstract: str | None = None
    abstract_checksum: str | None = None
    semantic_scholar_id: str | None = None
    open_alex_id: str | None = None
    decision: Decision
    decision_reason: str | None = None
    classification: ScopeClassification | None = None
    linked_node_ids: list[str] | None = None
    run_id: str


class AuditEntryRecord(LogRecordModel):
    timestamp: datetime
    run_id: str
    action: str
    entity_type: EntityKind
    entity_id: str
    source_apis: list[str] | None = None
    ai_classification: ScopeClassification | None = None
    mapping_confidence: float | None = None
    validation_outcome: ValidationOutcome
    validation_errors: list[str] | None = None
    reason: str | None = None
    ai_rationale: str | None = None
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
