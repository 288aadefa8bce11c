"""SQLAlchemy table metadata for the discovery event log."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from litscout.domain.model import Decision, DiscoveryAction, ScopeClassification

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class StringTupleType(TypeDecorator[tuple[str, ...]]):
    """Ordered string tuple stored as a JSON array; ``None`` stays ``NULL``."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: tuple[str, ...] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> tuple[str, ...] | None:
        _ = dialect
        if value is None:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return ()
        items = cast(list[Any], loaded)
        return tuple(item for item in items if isinstance(item, str))


def _values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

discovery_event_table = Table(
    "discovery_event",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("candidate_id", String, nullable=False),
    Column("partition_date", Date, nullable=False),
    Column("timestamp", UTCDateTime, nullable=False),
    Column(
        "action",
        Enum(DiscoveryAction, values_callable=_values, native_enum=False),
        nullable=False,
    ),
    Column("source", String, nullable=False),
    Column("discovered_at", UTCDateTime, nullable=False),
    Column("query", Text, nullable=False),
    Column("title", Text, nullable=False),
    Column("authors", StringTupleType, nullable=False),
    Column("year", Integer),
    Column("doi", String),
    Column("url", Text),
    Column("abstract", Text),
    Column("abstract_checksum", String),
    Column("semantic_scholar_id", String),
    Column("open_alex_id", String),
    Column(
        "decision",
        Enum(Decision, values_callable=_values, native_enum=False),
        nullable=False,
    ),
    Column("decision_reason", Text),
    Column(
        "classification",
        Enum(ScopeClassification, values_callable=_values, native_enum=False),
    ),
    Column("linked_node_ids", StringTupleType),
    Column("run_id", String, nullable=False),
)

Index("ix_discovery_event_partition", discovery_event_table.c.partition_date)
Index("ix_discovery_event_candidate", discovery_event_table.c.candidate_id)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
