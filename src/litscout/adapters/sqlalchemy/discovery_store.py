"""SQLAlchemy-backed discovery event store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, insert, select
from sqlalchemy.exc import SQLAlchemyError

from litscout.config.storage import get_database_config
from litscout.domain.clock import as_utc, utc_date
from litscout.domain.model import DiscoveryEvent

from .mappings import create_all_tables, discovery_event_table

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy import Row
    from sqlalchemy.engine import Engine

log = getLogger(__name__)

_COLUMNS = (
    "candidate_id",
    "timestamp",
    "action",
    "source",
    "discovered_at",
    "query",
    "title",
    "authors",
    "year",
    "doi",
    "url",
    "abstract",
    "abstract_checksum",
    "semantic_scholar_id",
    "open_alex_id",
    "decision",
    "decision_reason",
    "classification",
    "linked_node_ids",
    "run_id",
)


class StartupError(RuntimeError):
    """Raised when the discovery database cannot be initialised."""


def startup(*, engine: Engine | None = None, database_uri: str | None = None) -> Engine:
    """Create (or reuse) an engine and make sure the discovery tables exist."""

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    try:
        create_all_tables(resolved_engine)
    except SQLAlchemyError as exc:
        raise StartupError(f"Could not initialise discovery database: {exc}") from exc
    return resolved_engine


def _row_to_event(row: Row[tuple[object, ...]]) -> DiscoveryEvent:
    values = row._mapping  # noqa: SLF001
    return DiscoveryEvent(**{name: values[name] for name in _COLUMNS})


class SqlAlchemyDiscoveryEventStore:
    """Single-table event store; rows with equal timestamps keep insertion order."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def write(self, event: DiscoveryEvent) -> None:
        values = {name: getattr(event, name) for name in _COLUMNS}
        values["partition_date"] = utc_date(event.timestamp)
        values["timestamp"] = as_utc(event.timestamp)
        with self.engine.begin() as connection:
            connection.execute(insert(discovery_event_table).values(**values))
        log.debug("Stored %s for %s", event.action, event.candidate_id)

    def read_by_date(self, day: date) -> list[DiscoveryEvent]:
        table = discovery_event_table
        statement = select(table).where(table.c.partition_date == day).order_by(table.c.id)
        with self.engine.connect() as connection:
            return [_row_to_event(row) for row in connection.execute(statement)]

    def read_all(self) -> list[DiscoveryEvent]:
        table = discovery_event_table
        statement = select(table).order_by(table.c.partition_date, table.c.id)
        with self.engine.connect() as connection:
            return [_row_to_event(row) for row in connection.execute(statement)]

    def list_dates(self) -> list[date]:
        table = discovery_event_table
        statement = select(table.c.partition_date).distinct().order_by(table.c.partition_date)
        with self.engine.connect() as connection:
            return list(connection.execute(statement).scalars())

