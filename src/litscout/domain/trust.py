"""Default trust propagation over the graph."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from litscout.domain.model import UNCLASSIFIED_TRUST

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litscout.domain.model import GraphEdge, GraphNode

ROOT_TRUST = 1.0


def propagate_trust(
    nodes: Sequence[GraphNode], edges: Sequence[GraphEdge], root_id: str
) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Recompute trust depth-first from the root.

    Node trust and edge combined trust are reset to unclassified, the root gets full
    trust, and each edge's combined trust is ``parent.trust * edge.trust`` (unclassified
    when either side is). A child takes the combined trust when it beats what it
    already has. Returns copies; the inputs are left untouched.
    """

    new_nodes = [replace(node, trust=UNCLASSIFIED_TRUST) for node in nodes]
    new_edges = [replace(edge, combined_trust=UNCLASSIFIED_TRUST) for edge in edges]
    by_id = {node.id: node for node in new_nodes}
    outgoing: dict[str, list[GraphEdge]] = {}
    for edge in new_edges:
        outgoing.setdefault(edge.source_id, []).append(edge)

    root = by_id.get(root_id)
    if root is None:
        return new_nodes, new_edges
    root.trust = ROOT_TRUST

    stack = [root]
    seen: set[str] = set()
    while stack:
        parent = stack.pop()
        seen.add(parent.id)
        for edge in outgoing.get(parent.id, []):
            child = by_id.get(edge.target_id)
            if child is None:
                continue
            if parent.trust < 0 or edge.trust < 0:
                combined = UNCLASSIFIED_TRUST
            else:
                combined = parent.trust * edge.trust
            edge.combined_trust = combined
            if combined > child.trust:
                child.trust = combined
                stack.append(child)
            elif child.id not in seen:
                stack.append(child)
    return new_nodes, new_edges
