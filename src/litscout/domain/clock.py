"""Time helpers; the pipeline only ever deals in UTC."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime

type Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_date(value: datetime) -> date:
    """Calendar date used to partition logs and count daily caps."""

    return as_utc(value).date()
