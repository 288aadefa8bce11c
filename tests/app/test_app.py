from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from litscout.adapters.graph_file import load_graph, save_graph
from litscout.app import (
    Workspace,
    audit_entries,
    governance_stats,
    harvest_discovery_candidates,
    harvest_settings,
    import_discovery_candidates,
    list_candidates,
    new_run_id,
    next_agent_state,
    retry_candidate,
    validate_governance,
)
from litscout.config import (
    AgentConfig,
    AgentState,
    DiscoveryStats,
    load_agent_state,
    save_agent_config,
)
from litscout.domain.harvest import HarvestResult
from litscout.domain.import_pipeline import ImportOptions
from litscout.domain.model import Decision, DiscoveryFilters
from tests.helpers.factories import NOON, StepClock, make_graph, make_node, make_search_result

if TYPE_CHECKING:
    from pathlib import Path

    from litscout.domain.model import SearchResult
    from litscout.domain.ports import SearchRequest


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    graph_file = tmp_path / "graph.json"
    graph = make_graph(make_node("P2", "Ganzfeld", keywords=["telepathy"]))
    graph.nodes[0].description = "Root of the graph"
    save_graph(graph_file, graph)
    save_agent_config(graph_file, AgentConfig(search_apis=("openalex",), rate_limit_ms=0))
    return Workspace(graph_file=graph_file)


def test_new_run_id_uses_utc_stamp() -> None:
    assert new_run_id("discovery", NOON) == "discovery-20250314T120000Z"


def test_harvest_settings_follow_agent_config() -> None:
    config = AgentConfig(year_range=(1990, 2020), focus_keywords=("psi",), rate_limit_ms=250)

    settings = harvest_settings(config, run_id="r")
    overridden = harvest_settings(config, run_id="r", apis=["openalex"], max_queries=2)

    assert settings.apis == ("semantic-scholar", "openalex")
    assert settings.year_min == 1990
    assert settings.year_max == 2020
    assert settings.focus_keywords == ("psi",)
    assert settings.request_delay_seconds == 0.25
    assert settings.max_queries == config.max_queries_per_run
    assert overridden.apis == ("openalex",)
    assert overridden.max_queries == 2


def test_next_agent_state_accumulates_stats() -> None:
    state = AgentState(
        total_runs=1,
        recent_search_queries=("old",),
        discovery_stats=DiscoveryStats(queued=1, rejected=4),
    )
    result = HarvestResult(
        run_id="discovery-1",
        queries=["ganzfeld"],
        apis=["openalex"],
        by_decision={"queued": 2, "duplicate": 1},
        searched_queries=["ganzfeld"],
        processed_candidate_ids=["doi:10.1000/a"],
    )

    updated = next_agent_state(state, result, NOON)

    assert updated.last_run_timestamp == "2025-03-14T12:00:00Z"
    assert updated.last_run_id == "discovery-1"
    assert updated.last_discovery_run_id == "discovery-1"
    assert updated.total_runs == 2
    assert updated.recent_search_queries == ("old", "ganzfeld")
    assert updated.processed_candidate_ids == ("doi:10.1000/a",)
    assert updated.discovery_stats == DiscoveryStats(queued=3, duplicate=1, rejected=4)


def test_harvest_then_import_updates_graph(workspace: Workspace) -> None:
    requests: list[SearchRequest] = []

    async def search(request: SearchRequest) -> list[SearchResult]:
        requests.append(request)
        return [make_search_result("Fresh ganzfeld replication", doi="10.1000/a")]

    harvest = harvest_discovery_candidates(
        workspace, run_id="harvest-1", queries=["ganzfeld"], search=search, clock=StepClock()
    )

    assert harvest.events_written == 1
    assert [request.api for request in requests] == ["openalex"]
    state = load_agent_state(workspace.graph_file)
    assert state.total_runs == 1
    assert state.processed_candidate_ids == ("doi:10.1000/a",)
    assert state.discovery_stats.queued == 1

    result = import_discovery_candidates(
        workspace,
        ImportOptions(run_id="import-1", enforce_scope_filter=False),
        clock=StepClock(),
    )

    assert result.imported == 1
    graph = load_graph(workspace.graph_file)
    assert [reference.doi for reference in graph.references] == ["10.1000/a"]
    (candidate,) = list_candidates(workspace, DiscoveryFilters())
    assert candidate.decision is Decision.IMPORTED_DRAFT
    assert {entry.run_id for entry in audit_entries(workspace, day=NOON.date())} == {"import-1"}


def test_import_without_candidates_leaves_graph_untouched(workspace: Workspace) -> None:
    before = workspace.graph_file.read_text(encoding="utf-8")

    result = import_discovery_candidates(workspace, ImportOptions(run_id="import-1"))

    assert result.attempted == 0
    assert workspace.graph_file.read_text(encoding="utf-8") == before


def test_retry_unknown_candidate(workspace: Workspace) -> None:
    assert retry_candidate(workspace, "doi:10.1000/unknown") is None


def test_governance_views(workspace: Workspace) -> None:
    clock = StepClock()

    report = validate_governance(workspace, clock=clock)
    stats = governance_stats(workspace, clock=clock)

    assert report.valid
    assert stats.date == NOON.date()
    assert stats.total_nodes == 2
    assert stats.total_references == 0
    assert stats.today_node_count == 0
    assert stats.remaining == stats.daily_cap
