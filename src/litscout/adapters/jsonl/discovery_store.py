"""JSON Lines backed discovery event store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from litscout.domain.clock import utc_date

from .partitions import append_line, list_partition_dates, partition_file, read_partition
from .schema import DiscoveryEventRecord
from .translator import event_to_record, record_to_event

if TYPE_CHECKING:
    from datetime import date
    from pathlib import Path

    from litscout.domain.model import DiscoveryEvent

    from .partitions import PartitionRead

log = getLogger(__name__)

CANDIDATES_FILENAME = "candidates.jsonl"


def _parse(line: str) -> DiscoveryEvent:
    return record_to_event(DiscoveryEventRecord.model_validate_json(line))


class JsonlDiscoveryEventStore:
    """Stores events under ``<base>/research/discovery/<YYYY-MM-DD>/candidates.jsonl``."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.root = base_dir / "research" / "discovery"

    def write(self, event: DiscoveryEvent) -> None:
        line = event_to_record(event).to_line()
        path = append_line(self.root, utc_date(event.timestamp), CANDIDATES_FILENAME, line)
        log.debug("Appended %s for %s to %s", event.action, event.candidate_id, path)

    def read_partition(self, day: date) -> PartitionRead[DiscoveryEvent]:
        return read_partition(partition_file(self.root, day, CANDIDATES_FILENAME), _parse)

    def read_by_date(self, day: date) -> list[DiscoveryEvent]:
        return self.read_partition(day).records

    def read_all(self) -> list[DiscoveryEvent]:
        events: list[DiscoveryEvent] = []
        for day in self.list_dates():
            events.extend(self.read_by_date(day))
        return events

    def list_dates(self) -> list[date]:
        return list_partition_dates(self.root, CANDIDATES_FILENAME)

