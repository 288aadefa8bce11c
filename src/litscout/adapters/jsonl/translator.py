"""Translate between log records and domain objects."""

from __future__ import annotations

from litscout.domain.clock import as_utc
from litscout.domain.model import AuditEntry, DiscoveryEvent

from .schema import AuditEntryRecord, DiscoveryEventRecord


def event_to_record(event: DiscoveryEvent) -> DiscoveryEventRecord:
    return DiscoveryEventRecord(
        candidate_id=event.candidate_id,
        timestamp=as_utc(event.timestamp),
        action=event.action,
        source=event.source,
        discovered_at=as_utc(event.discovered_at),
        query=event.query,
        title=event.title,
        authors=list(event.authors),
        year=event.year,
        doi=event.doi,
        url=event.url,
        abstract=event.abstract,
        abstract_checksum=event.abstract_checksum,
        semantic_scholar_id=event.semantic_scholar_id,
        open_alex_id=event.open_alex_id,
        decision=event.decision,
        decision_reason=event.decision_reason,
        classification=event.classification,
        linked_node_ids=(
            list(event.linked_node_ids) if event.linked_node_ids is not None else None
        ),
        run_id=event.run_id,
    )


def record_to_event(record: DiscoveryEventRecord) -> DiscoveryEvent:
    return DiscoveryEvent(
        candidate_id=record.candidate_id,
        timestamp=as_utc(record.timestamp),
        action=record.action,
        source=record.source,
        discovered_at=as_utc(record.discovered_at),
        query=record.query,
        title=record.title,
        authors=tuple(record.authors),
        year=record.year,
        doi=record.doi,
        url=record.url,
        abstract=record.abstract,
        abstract_checksum=record.abstract_checksum,
        semantic_scholar_id=record.semantic_scholar_id,
        open_alex_id=record.open_alex_id,
        decision=record.decision,
        decision_reason=record.decision_reason,
        classification=record.classification,
        linked_node_ids=(
            tuple(record.linked_node_ids) if record.linked_node_ids is not None else None
        ),
        run_id=record.run_id,
    )


def entry_to_record(entry: AuditEntry) -> AuditEntryRecord:
    return AuditEntryRecord(
        timestamp=as_utc(entry.timestamp),
        run_id=entry.run_id,
        action=entry.action,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        source_apis=list(entry.source_apis) if entry.source_apis is not None else None,
        ai_classification=entry.ai_classification,
        mapping_confidence=entry.mapping_confidence,
        validation_outcome=entry.validation_outcome,
        validation_errors=list(entry.validation_errors) or None,
        reason=entry.reason,
        ai_rationale=entry.ai_rationale,
        before=entry.before,
        after=entry.after,
    )


def record_to_entry(record: AuditEntryRecord) -> AuditEntry:
    return AuditEntry(
        timestamp=as_utc(record.timestamp),
        run_id=record.run_id,
        action=record.action,
        entity_type=record.entity_type,
        entity_id=record.entity_id,
        source_apis=tuple(record.source_apis) if record.source_apis is not None else None,
        ai_classification=record.ai_classification,
        mapping_confidence=record.mapping_confidence,
        validation_outcome=record.validation_outcome,
        validation_errors=tuple(record.validation_errors or ()),
        reason=record.reason,
        ai_rationale=record.ai_rationale,
        before=record.before,
        after=record.after,
    )
