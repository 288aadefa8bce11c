from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from litscout.adapters.graph_file import save_graph
from litscout.config import AgentConfig, save_agent_config
from litscout.config.governance import GOVERNANCE_FILENAME
from litscout.domain.harvest import HarvestResult
from litscout.domain.import_pipeline import ImportResult
from litscout.domain.model import ReviewStatus
from litscout.ui import cli
from tests.helpers.factories import make_graph, make_node

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    path = tmp_path / "graph.json"
    graph = make_graph(make_node("P2", "Ganzfeld"))
    graph.nodes[0].description = "Root of the graph"
    save_graph(path, graph)
    return path


def _run(graph_file: Path, *args: str) -> None:
    cli.main(["-f", str(graph_file), *args])


def test_graph_file_is_required() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["governance", "stats"])

    assert excinfo.value.code == 2


def test_graph_file_from_environment(
    monkeypatch: pytest.MonkeyPatch, graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv(cli.GRAPH_FILE_ENV, str(graph_file))

    cli.main(["governance", "stats"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["totalNodes"] == 2


def test_invalid_date_is_a_usage_error(graph_file: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(graph_file, "discovery", "list", "--date", "14.03.2025")

    assert excinfo.value.code == 2


def test_governance_config_set_and_show(
    graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(
        graph_file,
        "governance",
        "config",
        "--set",
        "maxDailyNewNodes=3",
        "duplicateRejection=false",
    )
    capsys.readouterr()

    _run(graph_file, "governance", "config", "--show")

    shown = json.loads(capsys.readouterr().out)
    assert shown["maxDailyNewNodes"] == 3
    assert shown["duplicateRejection"] is False
    stored = json.loads((graph_file.parent / GOVERNANCE_FILENAME).read_text(encoding="utf-8"))
    assert stored == shown


def test_governance_config_rejects_bad_setting(
    graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(graph_file, "governance", "config", "--set", "maxDailyNewNodes")

    assert excinfo.value.code == cli.EXIT_BLOCKED
    assert "Expected KEY=VALUE" in capsys.readouterr().err
    assert not (graph_file.parent / GOVERNANCE_FILENAME).exists()


def test_governance_validate_passes_clean_graph(
    graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(graph_file, "governance", "validate")

    payload = json.loads(capsys.readouterr().out)
    assert payload["valid"] is True
    assert payload["errorCount"] == 0


def test_governance_validate_blocks_on_errors(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    graph_file = tmp_path / "graph.json"
    save_graph(graph_file, make_graph())

    with pytest.raises(SystemExit) as excinfo:
        _run(graph_file, "governance", "validate")

    assert excinfo.value.code == cli.EXIT_BLOCKED
    payload = json.loads(capsys.readouterr().out)
    assert payload["valid"] is False
    assert payload["errors"] == ['Node "Root": Node description is required but empty']


def test_audit_without_date_lists_available_dates(
    graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(graph_file, "governance", "audit")

    assert json.loads(capsys.readouterr().out) == {"availableDates": []}


def test_discovery_list_on_empty_log(graph_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(graph_file, "discovery", "list", "--status", "queued")

    assert json.loads(capsys.readouterr().out) == []


def test_retry_unknown_candidate_fails(
    graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(graph_file, "discovery", "retry", "doi:10.1000/missing")

    assert excinfo.value.code == cli.EXIT_BLOCKED
    assert "Unknown candidate: doi:10.1000/missing" in capsys.readouterr().err


def test_import_defaults_come_from_agent_config(
    monkeypatch: pytest.MonkeyPatch, graph_file: Path
) -> None:
    save_agent_config(
        graph_file,
        AgentConfig(
            max_new_refs_per_run=7,
            max_new_nodes_per_run=2,
            default_review_status="pending-review",
            focus_keywords=("ganzfeld",),
        ),
    )
    captured: dict[str, object] = {}

    def fake_import(workspace: object, options: object) -> ImportResult:
        captured["options"] = options
        return ImportResult(run_id="import-1")

    monkeypatch.setattr(cli, "import_discovery_candidates", fake_import)

    _run(graph_file, "discovery", "import", "--run-id", "import-1", "--auto-node-growth")

    options = captured["options"]
    assert options.run_id == "import-1"  # type: ignore[attr-defined]
    assert options.max_items == 7  # type: ignore[attr-defined]
    assert options.review_status is ReviewStatus.PENDING_REVIEW  # type: ignore[attr-defined]
    assert options.scope.scope_keywords == ("ganzfeld",)  # type: ignore[attr-defined]
    assert options.node_growth.enabled  # type: ignore[attr-defined]
    assert options.node_growth.max_new_nodes == 2  # type: ignore[attr-defined]


def test_import_flags_override_agent_config(
    monkeypatch: pytest.MonkeyPatch, graph_file: Path
) -> None:
    captured: dict[str, object] = {}

    def fake_import(workspace: object, options: object) -> ImportResult:
        captured["options"] = options
        return ImportResult(run_id="import-1")

    monkeypatch.setattr(cli, "import_discovery_candidates", fake_import)

    _run(
        graph_file,
        "discovery",
        "import",
        "--limit",
        "3",
        "--review-status",
        "approved",
        "--no-scope-filter",
        "--scope-keyword",
        "Telepathy",
        "psi",
    )

    options = captured["options"]
    assert options.run_id.startswith("discovery-import-")  # type: ignore[attr-defined]
    assert options.max_items == 3  # type: ignore[attr-defined]
    assert options.review_status is ReviewStatus.APPROVED  # type: ignore[attr-defined]
    assert not options.enforce_scope_filter  # type: ignore[attr-defined]
    assert options.scope.scope_keywords == ("telepathy", "psi")  # type: ignore[attr-defined]
    assert not options.node_growth.enabled  # type: ignore[attr-defined]


def test_harvest_forwards_arguments(
    monkeypatch: pytest.MonkeyPatch, graph_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_harvest(workspace: object, **kwargs: object) -> HarvestResult:
        captured.update(kwargs)
        return HarvestResult(run_id="h", queries=["psi"], apis=["openalex"])

    monkeypatch.setattr(cli, "harvest_discovery_candidates", fake_harvest)

    _run(graph_file, "discovery", "harvest", "--query", "psi", "--api", "openalex")

    assert captured == {
        "run_id": None,
        "queries": ["psi"],
        "apis": ["openalex"],
        "max_queries": None,
    }
    assert json.loads(capsys.readouterr().out)["runId"] == "h"


def test_unexpected_errors_exit_with_failure(
    monkeypatch: pytest.MonkeyPatch, graph_file: Path
) -> None:
    def broken(workspace: object) -> object:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(cli, "governance_stats", broken)

    with pytest.raises(SystemExit) as excinfo:
        _run(graph_file, "governance", "stats")

    assert excinfo.value.code == 1
