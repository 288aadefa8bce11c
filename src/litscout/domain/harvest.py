"""Harvest run: search literature APIs and append discovery events.

Fetches for every ``(query, api)`` pair are dispatched concurrently, each delayed by
its position times the configured inter-request delay. Results are folded into the
discovery log one at a time in ``(query, api)`` order, so the appended event order
does not depend on which request finished first.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from litscout.domain.clock import utc_now
from litscout.domain.discovery import create_discovery_event
from litscout.domain.model import Decision, DiscoveryAction
from litscout.domain.ports import CitationDirection, SearchRequest

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from litscout.domain.clock import Clock
    from litscout.domain.discovery import DiscoveryLog
    from litscout.domain.model import GraphData, SearchResult
    from litscout.domain.ports import CitationLookup, LiteratureSearch

log = getLogger(__name__)

ALREADY_PROCESSED_REASON = "already-processed-candidate-id"
KEYWORDS_PER_QUERY = 5

type Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True, kw_only=True)
class HarvestSettings:
    run_id: str
    apis: tuple[str, ...]
    limit: int = 20
    max_queries: int = 30
    year_min: int | None = None
    year_max: int | None = None
    queries: tuple[str, ...] = ()
    focus_keywords: tuple[str, ...] = ()
    exclude_keywords: tuple[str, ...] = ()
    citation_snowballs: int = 25
    request_delay_seconds: float = 1.0


@dataclass(frozen=True, slots=True)
class FetchFailure:
    query: str
    api: str
    reason: str


@dataclass(slots=True, kw_only=True)
class HarvestResult:
    run_id: str
    queries: list[str]
    apis: list[str]
    total_results: int = 0
    citation_anchor_count: int = 0
    citation_results: int = 0
    events_written: int = 0
    by_decision: dict[str, int] = field(default_factory=dict[str, int])
    failures: list[FetchFailure] = field(default_factory=list[FetchFailure])
    searched_queries: list[str] = field(default_factory=list[str])
    processed_candidate_ids: list[str] = field(default_factory=list[str])


def _unique(items: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        value = item.strip()
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out


def build_discovery_queries(
    graph: GraphData,
    *,
    focus_keywords: Sequence[str] = (),
    exclude_keywords: Sequence[str] = (),
    max_queries: int = 30,
) -> list[str]:
    """Queries for under-referenced or unclassified nodes, then focus keywords."""

    frontier_nodes = [
        node
        for node in graph.nodes
        if node.id != graph.root_id and (not node.reference_ids or node.trust < 0)
    ]
    frontier_nodes.sort(key=lambda node: node.trust, reverse=True)
    node_queries = [
        " ".join([node.name, *node.keywords[:KEYWORDS_PER_QUERY]]) for node in frontier_nodes
    ]
    excluded = set(exclude_keywords)
    focus = [keyword for keyword in focus_keywords if keyword not in excluded]
    return _unique([*node_queries, *focus])[: max(0, max_queries)]


async def _delayed[T](delay: float, sleep: Sleep, call: Callable[[], Awaitable[T]]) -> T:
    if delay > 0:
        await sleep(delay)
    return await call()


async def _gather_staggered[T](
    calls: Sequence[Callable[[], Awaitable[T]]], delay: float, sleep: Sleep
) -> list[T | BaseException]:
    return await asyncio.gather(
        *(_delayed(index * delay, sleep, call) for index, call in enumerate(calls)),
        return_exceptions=True,
    )


class _Folder:
    """Append events for fetched results, suppressing already-processed candidates."""

    def __init__(
        self,
        discovery_log: DiscoveryLog,
        graph: GraphData,
        run_id: str,
        processed: list[str],
        clock: Clock,
    ) -> None:
        self._log = discovery_log
        self._graph = graph
        self._run_id = run_id
        self._processed = processed
        self._seen = set(processed)
        self._clock = clock
        self.by_decision: Counter[str] = Counter()
        self.events_written = 0

    @property
    def processed(self) -> list[str]:
        return self._processed

    def fold(self, results: Sequence[SearchResult], query: str) -> None:
        for result in results:
            event = create_discovery_event(
                result, query, self._run_id, self._graph.references, timestamp=self._clock()
            )
            if event.candidate_id in self._seen:
                event = replace(
                    event,
                    decision=Decision.DUPLICATE,
                    decision_reason=ALREADY_PROCESSED_REASON,
                    action=DiscoveryAction.DECISION_UPDATE,
                )
            else:
                self._seen.add(event.candidate_id)
                self._processed.append(event.candidate_id)
            self.by_decision[event.decision.value] += 1
            self._log.append(event)
            self.events_written += 1


async def harvest_candidates(
    *,
    discovery_log: DiscoveryLog,
    graph: GraphData,
    settings: HarvestSettings,
    search: LiteratureSearch,
    citations: CitationLookup | None = None,
    processed_candidate_ids: Sequence[str] = (),
    clock: Clock = utc_now,
    sleep: Sleep = asyncio.sleep,
) -> HarvestResult:
    queries = (
        _unique(settings.queries)[: max(0, settings.max_queries)]
        if settings.queries
        else build_discovery_queries(
            graph,
            focus_keywords=settings.focus_keywords,
            exclude_keywords=settings.exclude_keywords,
            max_queries=settings.max_queries,
        )
    )
    result = HarvestResult(run_id=settings.run_id, queries=queries, apis=list(settings.apis))
    folder = _Folder(
        discovery_log, graph, settings.run_id, list(processed_candidate_ids), clock
    )

    pairs = [(query, api) for query in queries for api in settings.apis]
    log.info("Harvest %s: %d queries across %d APIs", settings.run_id, len(queries), len(pairs))
    outcomes = await _gather_staggered(
        [_search_call(search, settings, query, api) for query, api in pairs],
        settings.request_delay_seconds,
        sleep,
    )
    result.searched_queries.extend(queries)
    for (query, api), outcome in zip(pairs, outcomes, strict=True):
        if isinstance(outcome, BaseException):
            _record_failure(result, query, api, outcome)
            continue
        result.total_results += len(outcome)
        folder.fold(outcome, query)

    anchors = [ref.doi for ref in graph.references if ref.doi][
        : max(0, settings.citation_snowballs)
    ]
    result.citation_anchor_count = len(anchors)
    if citations is not None:
        outcomes = await _gather_staggered(
            [_citation_call(citations, doi, settings.limit) for doi in anchors],
            settings.request_delay_seconds,
            sleep,
        )
        for doi, outcome in zip(anchors, outcomes, strict=True):
            query = f"citations:{CitationDirection.CITING}:{doi}"
            result.searched_queries.append(query)
            if isinstance(outcome, BaseException):
                _record_failure(result, query, "citations", outcome)
                continue
            result.citation_results += len(outcome)
            result.total_results += len(outcome)
            folder.fold(outcome, query)

    result.events_written = folder.events_written
    result.by_decision = {
        decision.value: folder.by_decision.get(decision.value, 0) for decision in Decision
    }
    result.processed_candidate_ids = folder.processed
    log.info(
        "Harvest %s wrote %d events (%d failures)",
        settings.run_id,
        result.events_written,
        len(result.failures),
    )
    return result


def _search_call(
    search: LiteratureSearch, settings: HarvestSettings, query: str, api: str
) -> Callable[[], Awaitable[list[SearchResult]]]:
    request = SearchRequest(
        query=query,
        api=api,
        limit=settings.limit,
        year_min=settings.year_min,
        year_max=settings.year_max,
    )
    return lambda: search(request)


def _citation_call(
    citations: CitationLookup, doi: str, limit: int
) -> Callable[[], Awaitable[list[SearchResult]]]:
    return lambda: citations(doi, CitationDirection.CITING, limit)


def _record_failure(result: HarvestResult, query: str, api: str, error: BaseException) -> None:
    if not isinstance(error, Exception):
        raise error
    reason = f"{type(error).__name__}: {error}"
    log.warning("Fetch failed for %r via %s: %s", query, api, reason)
    result.failures.append(FetchFailure(query=query, api=api, reason=reason))
