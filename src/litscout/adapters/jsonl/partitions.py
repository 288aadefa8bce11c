"""Date-partitioned JSON Lines files: ``<root>/<YYYY-MM-DD>/<filename>``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

log = getLogger(__name__)

_DATE_DIR = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True, slots=True)
class PartitionRead[T]:
    """Records read from one partition.

    A partition with any unparsable line is reported as ``corrupt`` and yields no
    records at all, so a half-written file never contributes partial history.
    """

    records: list[T] = field(default_factory=list[T])
    corrupt: bool = False


def partition_file(root: Path, day: date, filename: str) -> Path:
    return root / day.isoformat() / filename


def append_line(root: Path, day: date, filename: str, line: str) -> Path:
    path = partition_file(root, day, filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(line + "\n")
    return path


def read_partition[T](path: Path, parse: Callable[[str], T]) -> PartitionRead[T]:
    if not path.is_file():
        return PartitionRead()
    try:
        text = path.read_text(encoding="utf-8")
        records = [parse(line) for line in text.splitlines() if line.strip()]
    except (OSError, UnicodeDecodeError, ValidationError, ValueError) as exc:
        log.warning("Ignoring unreadable log partition %s: %s", path, exc)
        return PartitionRead(corrupt=True)
    return PartitionRead(records=records)


def list_partition_dates(root: Path, filename: str) -> list[date]:
    """Dates with an existing partition file, oldest first."""

    if not root.is_dir():
        return []
    days: list[date] = []
    for child in root.iterdir():
        if not child.is_dir() or not _DATE_DIR.match(child.name):
            continue
        if not (child / filename).is_file():
            continue
        try:
            days.append(date.fromisoformat(child.name))
        except ValueError:
            continue
    return sorted(days)
