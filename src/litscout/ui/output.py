"""JSON rendering of command results."""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel


def to_payload(value: Any) -> Any:
    """Convert results into JSON-ready values with camelCase dataclass keys.

    Plain mapping keys are kept as they are, so decision names and snapshot fields
    appear unchanged.
    """

    if is_dataclass(value) and not isinstance(value, type):
        return {
            to_camel(item.name): to_payload(getattr(value, item.name))
            for item in fields(value)
            if item.name != "extras"
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_payload(item) for key, item in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [to_payload(item) for item in value]
    return value


def render(value: Any) -> str:
    return json.dumps(to_payload(value), indent=2)
