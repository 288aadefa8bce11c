"""Governance validation of hypothesis cards."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .publish_gate import ValidationMessages

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litscout.config import GovernanceConfig
    from litscout.domain.model import Hypothesis, Reference


def _statement_key(statement: str) -> str:
    return " ".join(statement.casefold().split())


def validate_hypotheses(
    hypotheses: Sequence[Hypothesis],
    references: Sequence[Reference],
    config: GovernanceConfig,
) -> ValidationMessages:
    messages = ValidationMessages()
    ref_ids = {ref.id for ref in references}
    by_statement: dict[str, list[str]] = {}

    for hypothesis in hypotheses:
        if not hypothesis.statement.strip():
            messages.errors.append(f"Hypothesis {hypothesis.id}: statement is empty")
        if config.require_hypothesis_evidence and not hypothesis.support_ref_ids:
            messages.errors.append(
                f"Hypothesis {hypothesis.id}: requires at least one supporting reference"
            )
        for ref_id in hypothesis.support_ref_ids:
            if ref_id not in ref_ids:
                messages.errors.append(
                    f"Hypothesis {hypothesis.id}: support ref not found ({ref_id})"
                )
        for ref_id in hypothesis.contradict_ref_ids:
            if ref_id not in ref_ids:
                messages.warnings.append(
                    f"Hypothesis {hypothesis.id}: contradict ref not found ({ref_id})"
                )
        by_statement.setdefault(_statement_key(hypothesis.statement), []).append(hypothesis.id)

    if config.duplicate_rejection:
        for statement, ids in by_statement.items():
            if len(ids) > 1:
                messages.errors.append(
                    f'Duplicate hypothesis statements ({", ".join(ids)}): "{statement}"'
                )
    return messages
