"""Public interface for the Semantic Scholar adapter."""

from __future__ import annotations

from .client import PAPER_FIELDS, SemanticScholarAPIError, SemanticScholarClient
from .schema import CitationsResponse, PaperPayload, SearchResponse
from .translator import parse_paper

__all__ = [
    "PAPER_FIELDS",
    "CitationsResponse",
    "PaperPayload",
    "SearchResponse",
    "SemanticScholarAPIError",
    "SemanticScholarClient",
    "parse_paper",
]
