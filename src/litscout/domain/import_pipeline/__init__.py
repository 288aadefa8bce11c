"""Import orchestrator turning queued candidates into references and nodes."""

from __future__ import annotations

from .options import DEFAULT_MAX_ITEMS, ImportOptions
from .orchestrator import (
    OUT_OF_SCOPE_PREFIX,
    ImportOrchestrator,
    import_queued_candidates,
    new_reference_id,
    processing_status_for,
)
from .result import (
    ImportDetail,
    ImportResult,
    NodeDecision,
    NodeDetail,
    SkipCode,
    SkipReasonSummary,
)

__all__ = [
    "DEFAULT_MAX_ITEMS",
    "OUT_OF_SCOPE_PREFIX",
    "ImportDetail",
    "ImportOptions",
    "ImportOrchestrator",
    "ImportResult",
    "NodeDecision",
    "NodeDetail",
    "SkipCode",
    "SkipReasonSummary",
    "import_queued_candidates",
    "new_reference_id",
    "processing_status_for",
]
