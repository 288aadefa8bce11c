"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from litscout.adapters.graph_file import load_graph, save_graph
from litscout.adapters.jsonl import JsonlAuditEntryStore, JsonlDiscoveryEventStore
from litscout.adapters.search import CitationLookupAdapter, LiteratureSearchService
from litscout.adapters.sqlalchemy import SqlAlchemyDiscoveryEventStore, startup
from litscout.config import (
    DiscoveryStats,
    load_agent_config,
    load_agent_state,
    load_governance_config,
    save_agent_state,
)
from litscout.domain.audit_trail import AuditTrail
from litscout.domain.clock import utc_date, utc_now
from litscout.domain.discovery import DiscoveryLog
from litscout.domain.governance import (
    build_governance_report,
    check_daily_constraint_edge_cap,
    check_daily_hypothesis_cap,
    check_daily_node_cap,
)
from litscout.domain.harvest import HarvestSettings, harvest_candidates
from litscout.domain.import_pipeline import import_queued_candidates
from litscout.domain.model import Decision

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from pathlib import Path

    from litscout.config import AgentConfig, AgentState, GovernanceConfig
    from litscout.domain.clock import Clock
    from litscout.domain.governance import GovernanceReport
    from litscout.domain.harvest import HarvestResult
    from litscout.domain.import_pipeline import ImportOptions, ImportResult
    from litscout.domain.model import (
        AuditEntry,
        DiscoveryEvent,
        DiscoveryFilters,
        DiscoverySummary,
    )
    from litscout.domain.ports import (
        CitationLookup,
        DiscoveryEventStore,
        LiteratureSearch,
    )

log = getLogger(__name__)


class StoreBackend(StrEnum):
    JSONL = "jsonl"
    SQL = "sql"


@dataclass(frozen=True, slots=True)
class Workspace:
    """Files belonging to one graph: logs and settings live beside the graph file."""

    graph_file: Path
    backend: StoreBackend = StoreBackend.JSONL

    @property
    def base_dir(self) -> Path:
        return self.graph_file.parent

    def event_store(self) -> DiscoveryEventStore:
        if self.backend is StoreBackend.SQL:
            return SqlAlchemyDiscoveryEventStore(startup())
        return JsonlDiscoveryEventStore(self.base_dir)

    def discovery_log(self, *, clock: Clock = utc_now) -> DiscoveryLog:
        return DiscoveryLog(self.event_store(), clock=clock)

    def audit_trail(self, *, clock: Clock = utc_now) -> AuditTrail:
        return AuditTrail(JsonlAuditEntryStore(self.base_dir), clock=clock)


@dataclass(frozen=True, slots=True)
class GovernanceStats:
    date: date
    today_node_count: int
    daily_cap: int
    remaining: int
    today_hypothesis_count: int
    hypothesis_daily_cap: int
    hypothesis_remaining: int
    today_constraint_edge_count: int
    constraint_edge_daily_cap: int
    constraint_edge_remaining: int
    total_nodes: int
    total_edges: int
    total_references: int
    total_hypotheses: int
    max_daily_trust_delta: float


# Discovery log ----------------------------------------------------------------


def list_candidates(workspace: Workspace, filters: DiscoveryFilters) -> list[DiscoveryEvent]:
    return workspace.discovery_log().list(filters)


def summarize_discovery(
    workspace: Workspace, day: date | None = None
) -> tuple[DiscoverySummary, list[date]]:
    discovery_log = workspace.discovery_log()
    return discovery_log.summarize(day), discovery_log.store.list_dates()


def retry_candidate(
    workspace: Workspace, candidate_id: str, *, run_id: str | None = None
) -> DiscoveryEvent | None:
    effective_run_id = run_id or f"manual-retry-{int(utc_now().timestamp() * 1000)}"
    return workspace.discovery_log().retry(candidate_id, effective_run_id)


def import_discovery_candidates(
    workspace: Workspace,
    options: ImportOptions,
    *,
    governance: GovernanceConfig | None = None,
    clock: Clock = utc_now,
) -> ImportResult:
    """Import queued candidates into the graph file and save it when it changed."""

    graph = load_graph(workspace.graph_file)
    effective_governance = governance or load_governance_config(workspace.graph_file)
    log.info("Starting discovery import %s on %s", options.run_id, workspace.graph_file)
    result = import_queued_candidates(
        discovery_log=workspace.discovery_log(clock=clock),
        audit_trail=workspace.audit_trail(clock=clock),
        graph=graph,
        governance=effective_governance,
        options=options,
        now=clock,
    )
    if result.imported_ref_ids or result.created_node_ids:
        save_graph(workspace.graph_file, graph)
    return result


# Harvest ----------------------------------------------------------------------


def harvest_settings(
    config: AgentConfig,
    *,
    run_id: str,
    queries: Sequence[str] = (),
    apis: Sequence[str] = (),
    max_queries: int | None = None,
) -> HarvestSettings:
    year_min, year_max = config.year_range
    return HarvestSettings(
        run_id=run_id,
        apis=tuple(apis) or config.search_apis,
        limit=config.max_results_per_query,
        max_queries=max_queries if max_queries is not None else config.max_queries_per_run,
        year_min=year_min,
        year_max=year_max,
        queries=tuple(queries),
        focus_keywords=config.focus_keywords,
        exclude_keywords=config.exclude_keywords,
        citation_snowballs=config.citation_snowballs_per_run,
        request_delay_seconds=config.rate_limit_ms / 1000,
    )


def next_agent_state(state: AgentState, result: HarvestResult, now: datetime) -> AgentState:
    """Fold one harvest run into the persisted agent state."""

    by_decision = result.by_decision
    stats = state.discovery_stats
    return replace(
        state,
        last_run_timestamp=now.astimezone(UTC).isoformat().replace("+00:00", "Z"),
        last_run_id=result.run_id,
        total_runs=state.total_runs + 1,
        recent_search_queries=(*state.recent_search_queries, *result.searched_queries),
        processed_candidate_ids=tuple(result.processed_candidate_ids),
        last_discovery_run_id=result.run_id,
        discovery_stats=DiscoveryStats(
            queued=stats.queued + by_decision.get(Decision.QUEUED, 0),
            parsed=stats.parsed + by_decision.get(Decision.PARSED, 0),
            imported=stats.imported + by_decision.get(Decision.IMPORTED_DRAFT, 0),
            duplicate=stats.duplicate + by_decision.get(Decision.DUPLICATE, 0),
            rejected=stats.rejected + by_decision.get(Decision.REJECTED, 0),
        ),
    )


def new_run_id(prefix: str, now: datetime) -> str:
    return f"{prefix}-{now.astimezone(UTC).strftime('%Y%m%dT%H%M%SZ')}"


async def _harvest_async(
    workspace: Workspace,
    settings: HarvestSettings,
    state: AgentState,
    search: LiteratureSearch | None,
    citations: CitationLookup | None,
    clock: Clock,
) -> HarvestResult:
    graph = load_graph(workspace.graph_file)
    discovery_log = workspace.discovery_log(clock=clock)
    if search is not None:
        return await harvest_candidates(
            discovery_log=discovery_log,
            graph=graph,
            settings=settings,
            search=search,
            citations=citations,
            processed_candidate_ids=state.processed_candidate_ids,
            clock=clock,
        )
    async with LiteratureSearchService() as service:
        return await harvest_candidates(
            discovery_log=discovery_log,
            graph=graph,
            settings=settings,
            search=service,
            citations=CitationLookupAdapter(service),
            processed_candidate_ids=state.processed_candidate_ids,
            clock=clock,
        )


def harvest_discovery_candidates(
    workspace: Workspace,
    *,
    run_id: str | None = None,
    queries: Sequence[str] = (),
    apis: Sequence[str] = (),
    max_queries: int | None = None,
    search: LiteratureSearch | None = None,
    citations: CitationLookup | None = None,
    clock: Clock = utc_now,
) -> HarvestResult:
    """Search the configured literature APIs and record new candidates.

    Without an injected ``search`` port the live Semantic Scholar and OpenAlex clients are
    used, and the citation lane runs against Semantic Scholar.
    """

    now = clock()
    config = load_agent_config(workspace.graph_file)
    state = load_agent_state(workspace.graph_file)
    settings = harvest_settings(
        config,
        run_id=run_id or new_run_id("discovery", now),
        queries=queries,
        apis=apis,
        max_queries=max_queries,
    )
    log.info("Starting discovery harvest %s across %s", settings.run_id, ", ".join(settings.apis))
    result = asyncio.run(_harvest_async(workspace, settings, state, search, citations, clock))
    save_agent_state(workspace.graph_file, next_agent_state(state, result, now))
    return result


# Governance -------------------------------------------------------------------


def validate_governance(workspace: Workspace, *, clock: Clock = utc_now) -> GovernanceReport:
    graph = load_graph(workspace.graph_file)
    config = load_governance_config(workspace.graph_file)
    audit_trail = workspace.audit_trail(clock=clock)
    return build_governance_report(graph, config, utc_date(clock()), audit_trail.today())


def governance_stats(workspace: Workspace, *, clock: Clock = utc_now) -> GovernanceStats:
    graph = load_graph(workspace.graph_file)
    config = load_governance_config(workspace.graph_file)
    today = utc_date(clock())
    nodes = check_daily_node_cap(graph.nodes, config.max_daily_new_nodes, today)
    hypotheses = check_daily_hypothesis_cap(
        graph.hypotheses, config.max_daily_new_hypotheses, today
    )
    constraints = check_daily_constraint_edge_cap(
        graph.edges, config.max_daily_constraint_edges, today
    )
    return GovernanceStats(
        date=today,
        today_node_count=nodes.today_count,
        daily_cap=config.max_daily_new_nodes,
        remaining=nodes.remaining,
        today_hypothesis_count=hypotheses.today_count,
        hypothesis_daily_cap=config.max_daily_new_hypotheses,
        hypothesis_remaining=hypotheses.remaining,
        today_constraint_edge_count=constraints.today_count,
        constraint_edge_daily_cap=config.max_daily_constraint_edges,
        constraint_edge_remaining=constraints.remaining,
        total_nodes=len(graph.nodes),
        total_edges=len(graph.edges),
        total_references=len(graph.references),
        total_hypotheses=len(graph.hypotheses),
        max_daily_trust_delta=config.max_daily_trust_delta,
    )


def audit_entries(
    workspace: Workspace,
    *,
    day: date | None = None,
    entity_id: str | None = None,
    clock: Clock = utc_now,
) -> list[AuditEntry]:
    """Entries for ``day`` (today when omitted), optionally for one entity only."""

    audit_trail = workspace.audit_trail(clock=clock)
    entries = audit_trail.for_date(day) if day is not None else audit_trail.today()
    if entity_id is not None:
        entries = [entry for entry in entries if entry.entity_id == entity_id]
    return entries


def audit_dates(workspace: Workspace) -> list[date]:
    return workspace.audit_trail().dates()
