# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from litscout.app import (
    StoreBackend,
    Workspace,
    audit_dates,
    audit_entries,
    governance_stats,
    harvest_discovery_candidates,
    import_discovery_candidates,
    list_candidates,
    new_run_id,
    retry_candidate,
    summarize_discovery,
    validate_governance,
)
from litscout.config import (
    ConfigurationError,
    apply_setting,
    configure_logging,
    load_agent_config,
    load_governance_config,
    save_governance_config,
)
from litscout.config.documents import to_document
from litscout.config.env import GRAPH_FILE_ENV, optional_env_path
from litscout.domain.clock import utc_now
from litscout.domain.import_pipeline import ImportOptions
from litscout.domain.model import Decision, DiscoveryFilters, ReviewStatus
from litscout.domain.node_growth import NodeGrowthPolicy
from litscout.domain.scope import DEFAULT_MAX_LINKED_NODES, DEFAULT_MIN_SCOPE_SCORE, ScopePolicy

from .output import render, to_payload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_BLOCKED = 1
EXIT_USAGE = 2


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="litscout",
        description="Discovery candidate ingestion and publish governance",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=optional_env_path(GRAPH_FILE_ENV),
        help=f"Graph JSON file (default: ${GRAPH_FILE_ENV})",
    )
    parser.add_argument(
        "--store",
        type=StoreBackend,
        choices=list(StoreBackend),
        default=StoreBackend.JSONL,
        help="Backend for the discovery event log (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    discovery = subparsers.add_parser("discovery", help="Discovery candidate log")
    discovery_sub = discovery.add_subparsers(dest="discovery_command", required=True)

    listing = discovery_sub.add_parser("list", help="List latest candidate states")
    listing.add_argument(
        "--date", type=_iso_date, help="Only candidates discovered on this UTC date (YYYY-MM-DD)"
    )
    listing.add_argument(
        "--status", type=Decision, choices=list(Decision), help="Filter by current decision"
    )
    listing.add_argument("--query", help="Case-insensitive substring of query or title")
    listing.add_argument("--api", help="Filter by source API")
    listing.add_argument("--run-id", help="Filter by run id")

    summary = discovery_sub.add_parser("summary", help="Summarize discovery activity")
    summary.add_argument("--date", type=_iso_date, help="Only this UTC date (YYYY-MM-DD)")

    retry = discovery_sub.add_parser("retry", help="Re-queue a candidate")
    retry.add_argument("candidate_id", help="Candidate id to re-queue")
    retry.add_argument("--run-id", help="Run id to record for the retry")

    importer = discovery_sub.add_parser("import", help="Import queued candidates into the graph")
    importer.add_argument("--run-id", help="Run id for this import (default: generated)")
    importer.add_argument("--source-run-id", help="Only import candidates from this run")
    importer.add_argument(
        "--date", type=_iso_date, help="Only import candidates discovered on this UTC date"
    )
    importer.add_argument(
        "--limit", type=int, help="Maximum candidates to attempt (default: agent config)"
    )
    importer.add_argument(
        "--review-status",
        type=ReviewStatus,
        choices=list(ReviewStatus),
        help="Review status for imported references (default: agent config)",
    )
    importer.add_argument(
        "--no-scope-filter",
        dest="scope_filter",
        action="store_false",
        help="Import out-of-scope candidates instead of rejecting them",
    )
    importer.add_argument(
        "--scope-keyword",
        nargs="+",
        default=None,
        help="Scope keywords (default: agent focus keywords)",
    )
    importer.add_argument(
        "--exclude-keyword",
        nargs="+",
        default=None,
        help="Keywords forcing out-of-scope (default: agent exclude keywords)",
    )
    importer.add_argument(
        "--min-scope-score",
        type=int,
        default=DEFAULT_MIN_SCOPE_SCORE,
        help="Minimum scope score for in-scope (default: %(default)s)",
    )
    importer.add_argument(
        "--max-linked-nodes",
        type=int,
        default=DEFAULT_MAX_LINKED_NODES,
        help="Maximum suggested node links per reference (default: %(default)s)",
    )
    importer.add_argument(
        "--auto-node-growth", action="store_true", help="Create nodes from imported candidates"
    )
    importer.add_argument(
        "--max-new-nodes", type=int, help="Maximum nodes created per run (default: agent config)"
    )
    importer.add_argument(
        "--min-node-confidence",
        type=float,
        default=NodeGrowthPolicy().min_node_confidence,
        help="Minimum confidence for node creation (default: %(default)s)",
    )

    harvest = discovery_sub.add_parser("harvest", help="Search literature APIs for candidates")
    harvest.add_argument("--run-id", help="Run id for this harvest (default: generated)")
    harvest.add_argument("--query", nargs="+", default=None, help="Explicit search queries")
    harvest.add_argument("--api", nargs="+", default=None, help="Search APIs to use")
    harvest.add_argument("--max-queries", type=int, help="Maximum queries (default: agent config)")

    governance = subparsers.add_parser("governance", help="Governance config, validation, audit")
    governance_sub = governance.add_subparsers(dest="governance_command", required=True)

    governance_sub.add_parser("validate", help="Run the publish gate over the whole graph")

    audit = governance_sub.add_parser("audit", help="Show audit entries")
    audit_when = audit.add_mutually_exclusive_group()
    audit_when.add_argument("--date", type=_iso_date, help="Entries for this UTC date")
    audit_when.add_argument("--today", action="store_true", help="Entries for today")
    audit.add_argument("--entity", help="Only entries for this entity id")

    config = governance_sub.add_parser("config", help="Show or update governance config")
    config.add_argument("--show", action="store_true", help="Show the current config")
    config.add_argument("--set", nargs="+", metavar="KEY=VALUE", help="Set config values")

    governance_sub.add_parser("stats", help="Show today's governance statistics")

    return parser


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _build_parser()
    args = parser.parse_args(list(argv))
    if args.file is None:
        parser.error(f"a graph file is required (--file or ${GRAPH_FILE_ENV})")
    return args


def _import_options(args: argparse.Namespace, workspace: Workspace) -> ImportOptions:
    agent = load_agent_config(workspace.graph_file)
    scope_keywords = args.scope_keyword if args.scope_keyword is not None else agent.focus_keywords
    exclude_keywords = (
        args.exclude_keyword if args.exclude_keyword is not None else agent.exclude_keywords
    )
    return ImportOptions(
        run_id=args.run_id or new_run_id("discovery-import", utc_now()),
        review_status=args.review_status or ReviewStatus(agent.default_review_status),
        source_run_id=args.source_run_id,
        date=args.date,
        max_items=args.limit if args.limit is not None else agent.max_new_refs_per_run,
        max_linked_nodes=args.max_linked_nodes,
        enforce_scope_filter=args.scope_filter,
        scope=ScopePolicy(
            scope_keywords=tuple(scope_keywords),
            exclude_keywords=tuple(exclude_keywords),
            min_scope_score=args.min_scope_score,
        ),
        node_growth=NodeGrowthPolicy(
            enabled=args.auto_node_growth,
            max_new_nodes=(
                args.max_new_nodes
                if args.max_new_nodes is not None
                else agent.max_new_nodes_per_run
            ),
            min_node_confidence=args.min_node_confidence,
        ),
    )


def _run_discovery(args: argparse.Namespace, workspace: Workspace) -> int:
    command = args.discovery_command
    if command == "list":
        filters = DiscoveryFilters(
            decision=args.status,
            source=args.api,
            run_id=args.run_id,
            date=args.date,
            text=args.query,
        )
        print(render(list_candidates(workspace, filters)))
    elif command == "summary":
        summary, dates = summarize_discovery(workspace, args.date)
        print(render({**to_payload(summary), "availableDates": dates}))
    elif command == "retry":
        candidate = retry_candidate(workspace, args.candidate_id, run_id=args.run_id)
        if candidate is None:
            print(f"Unknown candidate: {args.candidate_id}", file=sys.stderr)
            return EXIT_BLOCKED
        print(render({"status": "ok", "candidate": candidate}))
    elif command == "import":
        result = import_discovery_candidates(workspace, _import_options(args, workspace))
        log.info(
            "Discovery import finished: attempted=%s, imported=%s, nodes_created=%s",
            result.attempted,
            result.imported,
            result.nodes_created,
        )
        print(render(result))
    elif command == "harvest":
        result = harvest_discovery_candidates(
            workspace,
            run_id=args.run_id,
            queries=args.query or (),
            apis=args.api or (),
            max_queries=args.max_queries,
        )
        print(render(result))
    else:
        raise ValueError(f"Unsupported discovery command: {command}")
    return 0


def _parse_setting(pair: str) -> tuple[str, str]:
    key, separator, value = pair.partition("=")
    if not separator or not key.strip():
        raise ConfigurationError(f"Expected KEY=VALUE, got {pair!r}")
    return key.strip(), value.strip()


def _run_governance(args: argparse.Namespace, workspace: Workspace) -> int:
    command = args.governance_command
    if command == "validate":
        report = validate_governance(workspace)
        print(
            render(
                {
                    "valid": report.valid,
                    "errorCount": len(report.errors),
                    "warningCount": len(report.warnings),
                    "errors": report.errors,
                    "warnings": report.warnings,
                    "hypothesisCap": report.hypothesis_cap,
                    "constraintEdgeCap": report.constraint_edge_cap,
                }
            )
        )
        return 0 if report.valid else EXIT_BLOCKED
    if command == "audit":
        if args.date is None and not args.today:
            print(render({"availableDates": audit_dates(workspace)}))
            return 0
        print(render(audit_entries(workspace, day=args.date, entity_id=args.entity)))
        return 0
    if command == "config":
        config = load_governance_config(workspace.graph_file)
        if args.set:
            try:
                for pair in args.set:
                    config = apply_setting(config, *_parse_setting(pair))
            except ConfigurationError as exc:
                print(str(exc), file=sys.stderr)
                return EXIT_BLOCKED
            save_governance_config(workspace.graph_file, config)
            print(render({"status": "ok", "config": to_document(config)}))
            return 0
        print(render(to_document(config)))
        return 0
    if command == "stats":
        print(render(governance_stats(workspace)))
        return 0
    raise ValueError(f"Unsupported governance command: {command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    workspace = Workspace(graph_file=parsed_args.file, backend=parsed_args.store)
    try:
        if parsed_args.command == "discovery":
            code = _run_discovery(parsed_args, workspace)
        elif parsed_args.command == "governance":
            code = _run_governance(parsed_args, workspace)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)
    if code:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
