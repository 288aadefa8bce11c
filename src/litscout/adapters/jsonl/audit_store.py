"""JSON Lines backed audit entry store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from litscout.domain.clock import utc_date

from .partitions import append_line, list_partition_dates, partition_file, read_partition
from .schema import AuditEntryRecord
from .translator import entry_to_record, record_to_entry

if TYPE_CHECKING:
    from datetime import date
    from pathlib import Path

    from litscout.domain.model import AuditEntry

AUDIT_FILENAME = "audit.jsonl"


def _parse(line: str) -> AuditEntry:
    return record_to_entry(AuditEntryRecord.model_validate_json(line))


class JsonlAuditEntryStore:
    """Stores entries under ``<base>/research/runs/<YYYY-MM-DD>/audit.jsonl``."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.root = base_dir / "research" / "runs"

    def write(self, entry: AuditEntry) -> None:
        line = entry_to_record(entry).to_line()
        append_line(self.root, utc_date(entry.timestamp), AUDIT_FILENAME, line)

    def read_by_date(self, day: date) -> list[AuditEntry]:
        return read_partition(partition_file(self.root, day, AUDIT_FILENAME), _parse).records

    def list_dates(self) -> list[date]:
        return list_partition_dates(self.root, AUDIT_FILENAME)

