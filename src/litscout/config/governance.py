"""Publish governance policy."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

from .documents import overrides_for, read_document, sidecar_path, to_document, write_document
from .errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

GOVERNANCE_FILENAME = ".litscout-governance.json"

_CAP_FIELDS = (
    "max_daily_new_nodes",
    "max_daily_new_hypotheses",
    "max_daily_constraint_edges",
)


@dataclass(frozen=True, slots=True)
class GovernanceConfig:
    max_daily_new_nodes: int = 20
    max_daily_new_hypotheses: int = 15
    max_daily_constraint_edges: int = 40
    max_daily_trust_delta: float = 2.0
    require_description: bool = True
    require_ref_title_year_doi: bool = True
    require_hypothesis_evidence: bool = True
    duplicate_rejection: bool = True
    fuzzy_duplicate_threshold: float = 0.85

    def __post_init__(self) -> None:
        for name in _CAP_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
        delta = self.max_daily_trust_delta
        if not isinstance(delta, int | float) or delta < 0:
            raise ConfigurationError(
                f"max_daily_trust_delta must be non-negative, got {delta!r}"
            )
        threshold = self.fuzzy_duplicate_threshold
        if not isinstance(threshold, int | float) or not 0.0 <= threshold <= 1.0:
            raise ConfigurationError(
                f"fuzzy_duplicate_threshold must be within [0, 1], got {threshold!r}"
            )

    def with_overrides(self, **overrides: Any) -> GovernanceConfig:
        return replace(self, **overrides)


def governance_config_path(graph_file: Path) -> Path:
    return sidecar_path(graph_file, GOVERNANCE_FILENAME)


def load_governance_config(graph_file: Path) -> GovernanceConfig:
    """Load governance policy for ``graph_file``, merging defaults for absent keys."""

    document = read_document(governance_config_path(graph_file))
    return GovernanceConfig(**overrides_for(GovernanceConfig, document))


def save_governance_config(graph_file: Path, config: GovernanceConfig) -> Path:
    path = governance_config_path(graph_file)
    write_document(path, to_document(config))
    log.info("Saved governance config to %s", path)
    return path


def _coerce(key: str, current: object, raw: str) -> object:
    if isinstance(current, bool):
        lowered = raw.strip().lower()
        if lowered not in {"true", "false"}:
            raise ConfigurationError(f"{key} expects true or false, got {raw!r}")
        return lowered == "true"
    try:
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} expects a number, got {raw!r}") from exc
    return raw


def apply_setting(config: GovernanceConfig, key: str, raw_value: str) -> GovernanceConfig:
    """Return ``config`` with ``key`` (camelCase or snake_case) set from a CLI string.

    The string is coerced to the type of the current value.
    """

    for item in fields(config):
        if key in {item.name, to_camel(item.name)}:
            current = getattr(config, item.name)
            return config.with_overrides(**{item.name: _coerce(key, current, raw_value)})
    raise ConfigurationError(f"Unknown config key: {key}")
