"""Publish gate: editorial and rate-limit policy for new nodes and references.

Errors block the item they were raised for; warnings never block. Every message is
prefixed with the subject (``Node "<name>": `` or ``Ref "<title>": ``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litscout.domain.dedup import DuplicateMatch, find_duplicate

from .caps import check_daily_node_cap

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from litscout.config import GovernanceConfig
    from litscout.domain.model import GraphNode, Reference


@dataclass(slots=True, kw_only=True)
class NodeDraft:
    name: str
    description: str = ""
    id: str | None = None


@dataclass(slots=True, kw_only=True)
class ReferenceDraft:
    title: str
    authors: tuple[str, ...] = ()
    year: int | None = None
    doi: str | None = None
    url: str | None = None
    semantic_scholar_id: str | None = None
    open_alex_id: str | None = None
    id: str | None = None


@dataclass(slots=True)
class ValidationMessages:
    errors: list[str] = field(default_factory=list[str])
    warnings: list[str] = field(default_factory=list[str])


@dataclass(slots=True)
class PublishGateResult:
    errors: list[str] = field(default_factory=list[str])
    warnings: list[str] = field(default_factory=list[str])
    duplicates: list[DuplicateMatch] = field(default_factory=list[DuplicateMatch])

    @property
    def valid(self) -> bool:
        return not self.errors


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_node(
    node: NodeDraft, existing: Sequence[GraphNode], config: GovernanceConfig
) -> ValidationMessages:
    messages = ValidationMessages()
    if _blank(node.name):
        messages.errors.append("Node name is empty")
    if config.require_description and _blank(node.description):
        messages.errors.append("Node description is required but empty")

    if config.duplicate_rejection and not _blank(node.name):
        name = node.name.strip().casefold()
        dupes = [
            other.id
            for other in existing
            if other.id != node.id and other.name.strip().casefold() == name
        ]
        if dupes:
            messages.warnings.append(
                f'Duplicate node name "{node.name}" matches: {", ".join(dupes)}'
            )
    return messages


def validate_reference(
    ref: ReferenceDraft, existing: Sequence[Reference], config: GovernanceConfig
) -> tuple[ValidationMessages, DuplicateMatch | None]:
    messages = ValidationMessages()
    if _blank(ref.title):
        messages.errors.append("Reference title is empty")
    if config.require_ref_title_year_doi:
        if not ref.year:
            messages.errors.append("Reference year is required")
        if _blank(ref.doi) and _blank(ref.url):
            messages.errors.append("Reference requires either DOI or URL")

    match: DuplicateMatch | None = None
    if config.duplicate_rejection:
        match = find_duplicate(ref, existing, exclude_id=ref.id)
        if match is not None:
            messages.errors.append(
                f"Duplicate reference detected ({match.match_type}): matches {match.matched_id}"
            )
    return messages, match


def run_publish_gate(
    *,
    nodes: Sequence[NodeDraft] = (),
    references: Sequence[ReferenceDraft] = (),
    existing_nodes: Sequence[GraphNode],
    existing_references: Sequence[Reference],
    config: GovernanceConfig,
    today: date,
) -> PublishGateResult:
    result = PublishGateResult()

    if nodes:
        cap = check_daily_node_cap(existing_nodes, config.max_daily_new_nodes, today)
        if not cap.within_cap:
            result.errors.append(
                f"Daily node cap exceeded: {cap.today_count}/{config.max_daily_new_nodes} "
                "nodes created today"
            )
        elif cap.remaining < len(nodes):
            result.warnings.append(
                f"Only {cap.remaining} nodes remaining in daily cap ({len(nodes)} requested)"
            )

    for node in nodes:
        messages = validate_node(node, existing_nodes, config)
        result.errors.extend(f'Node "{node.name}": {error}' for error in messages.errors)
        result.warnings.extend(f'Node "{node.name}": {warning}' for warning in messages.warnings)

    for ref in references:
        messages, match = validate_reference(ref, existing_references, config)
        result.errors.extend(f'Ref "{ref.title}": {error}' for error in messages.errors)
        result.warnings.extend(f'Ref "{ref.title}": {warning}' for warning in messages.warnings)
        if match is not None:
            result.duplicates.append(match)

    return result
