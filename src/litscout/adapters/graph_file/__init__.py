"""Graph JSON file adapter."""

from __future__ import annotations

from .schema import GraphDocument
from .store import GraphFileError, load_graph, save_graph
from .translator import document_to_graph, graph_to_document

__all__ = [
    "GraphDocument",
    "GraphFileError",
    "document_to_graph",
    "graph_to_document",
    "load_graph",
    "save_graph",
]
