"""Discovery log service: current-state queries and transitions over an event store."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from litscout.domain.clock import utc_date, utc_now
from litscout.domain.model import (
    Decision,
    DiscoveryAction,
    DiscoveryFilters,
    DiscoverySummary,
)

from .reducer import latest_by_candidate, matches_filters

if TYPE_CHECKING:
    from datetime import date

    from litscout.domain.clock import Clock
    from litscout.domain.model import DiscoveryEvent, ScopeClassification
    from litscout.domain.ports import DiscoveryEventStore

log = getLogger(__name__)

MANUAL_RETRY_REASON = "manual-retry"


@dataclass(frozen=True, slots=True)
class DerivedDiscoveryState:
    """Aggregate view of the log used to seed agent state."""

    processed_candidate_ids: tuple[str, ...]
    total_candidates: int
    by_decision: dict[str, int]


class DiscoveryLog:
    """Event-sourced view over a :class:`DiscoveryEventStore`.

    The current decision of a candidate is never stored; it is always derived by
    folding the append-only log. Every transition appends a new event.
    """

    def __init__(self, store: DiscoveryEventStore, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    @property
    def store(self) -> DiscoveryEventStore:
        return self._store

    def append(self, event: DiscoveryEvent) -> None:
        self._store.write(event)

    def events(self, day: date | None = None) -> list[DiscoveryEvent]:
        if day is not None:
            return self._store.read_by_date(day)
        return self._store.read_all()

    def current(self, day: date | None = None) -> list[DiscoveryEvent]:
        return latest_by_candidate(self.events(day))

    def list(self, filters: DiscoveryFilters | None = None) -> list[DiscoveryEvent]:
        """Current state of every candidate matching ``filters``.

        A date filter selects candidates discovered on that UTC day, but their state is
        still folded over the whole log so later decisions are never missed.
        """

        filters = filters or DiscoveryFilters()
        day = filters.date
        return [
            event
            for event in self.current()
            if (day is None or utc_date(event.discovered_at) == day)
            and matches_filters(event, filters)
        ]

    def get(self, candidate_id: str) -> DiscoveryEvent | None:
        return next((e for e in self.current() if e.candidate_id == candidate_id), None)

    def record_decision(
        self,
        candidate: DiscoveryEvent,
        *,
        run_id: str,
        decision: Decision,
        reason: str,
        classification: ScopeClassification | None = None,
        linked_node_ids: tuple[str, ...] | None = None,
    ) -> DiscoveryEvent:
        """Append a ``decision-update`` event for ``candidate``."""

        event = replace(
            candidate,
            action=DiscoveryAction.DECISION_UPDATE,
            timestamp=self._clock(),
            run_id=run_id,
            decision=decision,
            decision_reason=reason,
            classification=classification or candidate.classification,
            linked_node_ids=(
                linked_node_ids if linked_node_ids is not None else candidate.linked_node_ids
            ),
        )
        self._store.write(event)
        log.debug("Candidate %s -> %s (%s)", candidate.candidate_id, decision, reason)
        return event

    def retry(self, candidate_id: str, run_id: str) -> DiscoveryEvent | None:
        """Re-open a candidate by appending a ``queued`` retry event.

        Returns ``None`` when the candidate has never been logged.
        """

        latest = self.get(candidate_id)
        if latest is None:
            log.info("Cannot retry unknown candidate %s", candidate_id)
            return None
        retried = replace(
            latest,
            action=DiscoveryAction.RETRY,
            timestamp=self._clock(),
            run_id=run_id,
            decision=Decision.QUEUED,
            decision_reason=MANUAL_RETRY_REASON,
        )
        self._store.write(retried)
        return retried

    def summarize(self, day: date | None = None) -> DiscoverySummary:
        events = self.events(day)
        latest = latest_by_candidate(events)
        by_decision = {decision.value: 0 for decision in Decision}
        by_decision.update(Counter(event.decision.value for event in latest))
        return DiscoverySummary(
            date=day,
            total_events=len(events),
            total_candidates=len(latest),
            by_decision=by_decision,
        )

    def derive_state(self) -> DerivedDiscoveryState:
        latest = self.current()
        summary = Counter(event.decision.value for event in latest)
        # oldest first so the most recent ids survive truncation
        processed = tuple(event.candidate_id for event in reversed(latest))
        return DerivedDiscoveryState(
            processed_candidate_ids=processed,
            total_candidates=len(latest),
            by_decision={decision.value: summary.get(decision.value, 0) for decision in Decision},
        )
