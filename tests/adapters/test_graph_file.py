from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from litscout.adapters.graph_file import GraphFileError, load_graph, save_graph
from litscout.domain.model import EdgeType, NodeType, ReviewStatus
from tests.helpers.factories import NOON

if TYPE_CHECKING:
    from pathlib import Path


def _document() -> dict[str, Any]:
    return {
        "version": 1,
        "prefix": "P",
        "rootId": "P1",
        "lastNodeNumber": 2,
        "theme": "dark",
        "nodes": [
            {"id": "P1", "name": "Root", "type": 0, "trust": 1.0, "layoutX": 12},
            {
                "id": "P2",
                "name": "Ganzfeld",
                "type": 1,
                "keywords": ["telepathy"],
                "referenceIds": ["ref-1"],
                "reviewStatus": "approved",
            },
        ],
        "edges": [
            {"id": "P1-P2", "sourceId": "P1", "targetId": "P2", "trust": 0.8, "type": 0},
            {"id": "P2-P1", "sourceId": "P2", "targetId": "P1", "type": "requires"},
        ],
        "references": [{"id": "ref-1", "title": "T", "year": 0, "doi": "", "customTag": "x"}],
        "hypotheses": [
            {
                "id": "H1",
                "statement": "S",
                "supportRefIds": ["ref-1"],
                "createdAt": "2025-03-14T12:00:00Z",
            }
        ],
    }


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(_document()), encoding="utf-8")
    return path


def test_load_graph_decodes_document(graph_file: Path) -> None:
    graph = load_graph(graph_file)

    assert graph.root_id == "P1"
    assert graph.last_node_number == 2
    root, ganzfeld = graph.nodes
    assert root.extras == {"layoutX": 12}
    assert ganzfeld.type is NodeType.CHOOSER
    assert ganzfeld.review_status is ReviewStatus.APPROVED
    assert [edge.type for edge in graph.edges] == [EdgeType.IMPLICATION, EdgeType.REQUIRES]
    [ref] = graph.references
    assert ref.year is None
    assert ref.doi is None
    assert ref.extras == {"customTag": "x"}
    assert graph.hypotheses[0].created_at == NOON
    assert graph.extras == {"theme": "dark"}


def test_save_graph_keeps_unknown_fields_and_codes(graph_file: Path) -> None:
    graph = load_graph(graph_file)
    graph.nodes[1].name = "Ganzfeld studies"

    save_graph(graph_file, graph)
    saved = json.loads(graph_file.read_text(encoding="utf-8"))

    assert saved["theme"] == "dark"
    assert saved["rootId"] == "P1"
    assert saved["nodes"][0]["layoutX"] == 12
    assert saved["nodes"][1]["name"] == "Ganzfeld studies"
    assert saved["nodes"][1]["type"] == 1
    assert saved["nodes"][1]["referenceIds"] == ["ref-1"]
    assert [edge["type"] for edge in saved["edges"]] == [0, "requires"]
    assert saved["references"][0]["year"] == 0
    assert saved["references"][0]["customTag"] == "x"
    assert "doi" not in saved["references"][0]
    assert not graph_file.with_name("graph.json.tmp").exists()


def test_missing_graph_file(tmp_path: Path) -> None:
    with pytest.raises(GraphFileError, match="Graph file not found"):
        load_graph(tmp_path / "absent.json")


def test_invalid_graph_file(tmp_path: Path) -> None:
    path = tmp_path / "graph.json"
    path.write_text('{"nodes": []}', encoding="utf-8")

    with pytest.raises(GraphFileError, match="Invalid graph file"):
        load_graph(path)


def test_unknown_node_type_code(tmp_path: Path) -> None:
    document = _document()
    document["nodes"][1]["type"] = 9
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    with pytest.raises(GraphFileError, match="Unknown NodeType code: 9"):
        load_graph(path)


def test_stale_node_counter_is_raised_to_highest_id(tmp_path: Path) -> None:
    document = _document()
    document["lastNodeNumber"] = 1
    document["nodes"].append({"id": "P7", "name": "Dreams"})
    document["nodes"].append({"id": "custom", "name": "Imported"})
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    graph = load_graph(path)

    assert graph.last_node_number == 7
    assert graph.allocate_node_id() == "P8"
