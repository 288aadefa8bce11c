"""Load and save the graph JSON file."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import GraphDocument
from .translator import document_to_graph, graph_to_document

if TYPE_CHECKING:
    from pathlib import Path

    from litscout.domain.model import GraphData

log = getLogger(__name__)


class GraphFileError(RuntimeError):
    """Raised when the graph file is missing or does not hold a graph document."""


def load_graph(path: Path) -> GraphData:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise GraphFileError(f"Graph file not found: {path}") from exc
    try:
        document = GraphDocument.model_validate_json(text)
        return document_to_graph(document)
    except (ValidationError, ValueError) as exc:
        raise GraphFileError(f"Invalid graph file {path}: {exc}") from exc


def save_graph(path: Path, graph: GraphData) -> None:
    payload = graph_to_document(graph).model_dump(mode="json", by_alias=True, exclude_none=True)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    tmp_path.replace(path)
    log.info(
        "Saved graph (%d nodes, %d refs) to %s", len(graph.nodes), len(graph.references), path
    )
