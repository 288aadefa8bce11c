from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from litscout.adapters.jsonl import JsonlAuditEntryStore, JsonlDiscoveryEventStore
from litscout.domain.model import (
    AuditEntry,
    Decision,
    EntityKind,
    ScopeClassification,
    ValidationOutcome,
)
from tests.helpers.factories import NOON, make_event

if TYPE_CHECKING:
    from pathlib import Path

YESTERDAY = NOON - timedelta(days=1)


def test_events_are_partitioned_by_utc_date(tmp_path: Path) -> None:
    store = JsonlDiscoveryEventStore(tmp_path)
    old = make_event("a", timestamp=YESTERDAY)
    new = make_event(
        "b",
        timestamp=NOON,
        decision=Decision.IMPORTED_DRAFT,
        decision_reason="imported as ref-1",
    )
    store.write(new)
    store.write(old)

    assert store.list_dates() == [YESTERDAY.date(), NOON.date()]
    assert store.read_by_date(NOON.date()) == [new]
    assert store.read_all() == [old, new]
    assert (tmp_path / "research" / "discovery" / "2025-03-14" / "candidates.jsonl").is_file()


def test_lines_use_camel_case_and_skip_empty_fields(tmp_path: Path) -> None:
    store = JsonlDiscoveryEventStore(tmp_path)
    store.write(make_event("a"))

    path = tmp_path / "research" / "discovery" / "2025-03-14" / "candidates.jsonl"
    [line] = path.read_text(encoding="utf-8").splitlines()
    record = json.loads(line)

    assert record["candidateId"] == "a"
    assert record["runId"] == "run-1"
    assert record["decision"] == "queued"
    assert "decisionReason" not in record
    assert "linkedNodeIds" not in record


def test_classification_and_links_round_trip(tmp_path: Path) -> None:
    store = JsonlDiscoveryEventStore(tmp_path)
    linked = replace(
        make_event("a"), classification=ScopeClassification.CORE, linked_node_ids=("P2", "P3")
    )
    store.write(linked)

    [loaded] = store.read_by_date(NOON.date())

    assert loaded.classification is ScopeClassification.CORE
    assert loaded.linked_node_ids == ("P2", "P3")


def test_corrupt_partition_contributes_nothing(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    store = JsonlDiscoveryEventStore(tmp_path)
    store.write(make_event("a"))
    path = tmp_path / "research" / "discovery" / "2025-03-14" / "candidates.jsonl"
    with path.open("a", encoding="utf-8") as handle:
        handle.write("{not json\n")

    with caplog.at_level(logging.WARNING, logger="litscout.adapters.jsonl.partitions"):
        partition = store.read_partition(NOON.date())

    assert partition.corrupt
    assert partition.records == []
    assert store.read_all() == []
    record = next(r for r in caplog.records if r.levelno == logging.WARNING)
    assert record.msg == "Ignoring unreadable log partition %s: %s"
    assert isinstance(record.args, tuple)
    assert record.args[0] == path


def test_missing_partition_is_empty(tmp_path: Path) -> None:
    store = JsonlDiscoveryEventStore(tmp_path)

    assert store.read_by_date(NOON.date()) == []
    assert store.list_dates() == []


def test_audit_entries_round_trip(tmp_path: Path) -> None:
    store = JsonlAuditEntryStore(tmp_path)
    entry = AuditEntry(
        timestamp=NOON,
        run_id="run-1",
        action="discovery-import-reference",
        entity_type=EntityKind.REFERENCE,
        entity_id="ref-1",
        validation_outcome=ValidationOutcome.REJECTED,
        after={"candidateId": "a", "linkedNodeIds": ["P2"]},
        reason="nope",
        validation_errors=("first", "second"),
        source_apis=("openalex",),
        ai_classification=ScopeClassification.ADJACENT,
        mapping_confidence=0.5,
    )
    store.write(entry)

    assert store.read_by_date(NOON.date()) == [entry]
    assert store.list_dates() == [NOON.date()]
    assert (tmp_path / "research" / "runs" / "2025-03-14" / "audit.jsonl").is_file()


def test_audit_entry_without_errors_reads_back_empty(tmp_path: Path) -> None:
    store = JsonlAuditEntryStore(tmp_path)
    entry = AuditEntry(
        timestamp=NOON,
        run_id="run-1",
        action="discovery-import-node",
        entity_type=EntityKind.NODE,
        entity_id="P3",
        validation_outcome=ValidationOutcome.ACCEPTED,
    )
    store.write(entry)

    [loaded] = store.read_by_date(NOON.date())

    assert loaded.validation_errors == ()
    assert loaded.source_apis is None
    assert loaded.after is None
