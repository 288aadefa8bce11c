"""Ports for graph-level collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litscout.domain.model import GraphEdge, GraphNode


@runtime_checkable
class TrustPropagator(Protocol):
    """Recompute node and edge trust after the graph structure changed."""

    def __call__(
        self, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge], root_id: str
    ) -> tuple[list[GraphNode], list[GraphEdge]]: ...


__all__ = ["TrustPropagator"]
