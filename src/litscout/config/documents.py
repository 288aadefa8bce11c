"""JSON settings documents stored next to the graph file."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


def sidecar_path(graph_file: Path, filename: str) -> Path:
    return graph_file.parent / filename


def read_document(path: Path) -> dict[str, Any]:
    """Return the JSON object stored at ``path``.

    Missing files yield an empty mapping; unreadable or non-object files are logged and
    treated the same way so callers always fall back to defaults.
    """

    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    if not isinstance(payload, dict):
        log.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}
    return payload


def write_document(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def overrides_for(cls: type, document: dict[str, Any]) -> dict[str, Any]:
    """Pick the camelCase keys of ``document`` that name fields of dataclass ``cls``."""

    overrides: dict[str, Any] = {}
    for item in fields(cls):
        key = to_camel(item.name)
        if key in document:
            overrides[item.name] = document[key]
    return overrides


def to_document(instance: Any) -> dict[str, Any]:
    return {to_camel(name): value for name, value in asdict(instance).items()}
