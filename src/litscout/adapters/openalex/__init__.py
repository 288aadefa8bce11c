"""Public interface for the OpenAlex adapter."""

from __future__ import annotations

from .client import WORK_FIELDS, OpenAlexAPIError, OpenAlexClient
from .schema import WorkPayload, WorksResponse
from .translator import normalize_doi, parse_work, reconstruct_abstract

__all__ = [
    "WORK_FIELDS",
    "OpenAlexAPIError",
    "OpenAlexClient",
    "WorkPayload",
    "WorksResponse",
    "normalize_doi",
    "parse_work",
    "reconstruct_abstract",
]
