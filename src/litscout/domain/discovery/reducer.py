"""Latest-state reduction over the append-only discovery log."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from litscout.domain.model import DiscoveryEvent, DiscoveryFilters


def latest_by_candidate(events: Iterable[DiscoveryEvent]) -> list[DiscoveryEvent]:
    """Fold ``events`` (in read order) into the current event per candidate.

    The newest timestamp wins; an event with an equal timestamp that was read later
    replaces the earlier one. The result is ordered newest first.
    """

    latest: dict[str, DiscoveryEvent] = {}
    for event in events:
        current = latest.get(event.candidate_id)
        if current is None or event.timestamp >= current.timestamp:
            latest[event.candidate_id] = event
    return sorted(latest.values(), key=lambda event: event.timestamp, reverse=True)


def matches_filters(event: DiscoveryEvent, filters: DiscoveryFilters) -> bool:
    if filters.decision is not None and event.decision != filters.decision:
        return False
    if filters.source is not None and event.source != filters.source:
        return False
    if filters.run_id is not None and event.run_id != filters.run_id:
        return False
    if filters.text:
        needle = filters.text.casefold()
        if needle not in event.query.casefold() and needle not in event.title.casefold():
            return False
    return True
