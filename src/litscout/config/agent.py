"""Discovery agent settings and persisted run state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from .documents import overrides_for, read_document, sidecar_path, to_document, write_document
from .errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

AGENT_CONFIG_FILENAME = ".litscout-agent.json"
AGENT_STATE_FILENAME = ".litscout-agent-state.json"

MAX_RECENT_QUERIES = 200
MAX_PROCESSED_CANDIDATE_IDS = 5000

type ReviewStatusName = Literal["draft", "pending-review", "approved", "rejected"]

_REVIEW_STATUSES = frozenset({"draft", "pending-review", "approved", "rejected"})


@dataclass(frozen=True, slots=True)
class AgentConfig:
    search_apis: tuple[str, ...] = ("semantic-scholar", "openalex")
    max_results_per_query: int = 20
    max_queries_per_run: int = 30
    max_new_nodes_per_run: int = 5
    max_new_refs_per_run: int = 20
    citation_snowballs_per_run: int = 25
    default_review_status: ReviewStatusName = "draft"
    year_range: tuple[int, int] = (1970, 2026)
    focus_keywords: tuple[str, ...] = ()
    exclude_keywords: tuple[str, ...] = ()
    rate_limit_ms: int = 1000

    def __post_init__(self) -> None:
        # JSON documents hand over lists
        for name in ("search_apis", "focus_keywords", "exclude_keywords", "year_range"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if self.default_review_status not in _REVIEW_STATUSES:
            raise ConfigurationError(
                f"default_review_status must be one of {sorted(_REVIEW_STATUSES)}, "
                f"got {self.default_review_status!r}"
            )
        if len(self.year_range) != 2 or self.year_range[0] > self.year_range[1]:
            raise ConfigurationError(f"year_range must be [start, end], got {self.year_range!r}")
        for name in (
            "max_results_per_query",
            "max_queries_per_run",
            "max_new_nodes_per_run",
            "max_new_refs_per_run",
            "citation_snowballs_per_run",
            "rate_limit_ms",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative")


@dataclass(frozen=True, slots=True)
class DiscoveryStats:
    queued: int = 0
    parsed: int = 0
    imported: int = 0
    duplicate: int = 0
    rejected: int = 0


@dataclass(frozen=True, slots=True)
class AgentState:
    last_run_timestamp: str = ""
    last_run_id: str = ""
    total_runs: int = 0
    recent_search_queries: tuple[str, ...] = ()
    processed_candidate_ids: tuple[str, ...] = ()
    last_discovery_run_id: str = ""
    discovery_stats: DiscoveryStats = field(default_factory=DiscoveryStats)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "recent_search_queries", tuple(self.recent_search_queries)[-MAX_RECENT_QUERIES:]
        )
        object.__setattr__(
            self,
            "processed_candidate_ids",
            tuple(self.processed_candidate_ids)[-MAX_PROCESSED_CANDIDATE_IDS:],
        )
        if isinstance(self.discovery_stats, dict):
            stats = overrides_for(DiscoveryStats, self.discovery_stats)
            object.__setattr__(self, "discovery_stats", DiscoveryStats(**stats))


def agent_config_path(graph_file: Path) -> Path:
    return sidecar_path(graph_file, AGENT_CONFIG_FILENAME)


def agent_state_path(graph_file: Path) -> Path:
    return sidecar_path(graph_file, AGENT_STATE_FILENAME)


def load_agent_config(graph_file: Path) -> AgentConfig:
    document = read_document(agent_config_path(graph_file))
    return AgentConfig(**overrides_for(AgentConfig, document))


def save_agent_config(graph_file: Path, config: AgentConfig) -> Path:
    path = agent_config_path(graph_file)
    write_document(path, to_document(config))
    return path


def load_agent_state(graph_file: Path) -> AgentState:
    document = read_document(agent_state_path(graph_file))
    return AgentState(**overrides_for(AgentState, document))


def save_agent_state(graph_file: Path, state: AgentState) -> Path:
    path = agent_state_path(graph_file)
    write_document(path, to_document(state))
    return path
