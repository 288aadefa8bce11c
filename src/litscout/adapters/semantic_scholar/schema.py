"""Pydantic models describing the Semantic Scholar Graph API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SemanticScholarBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AuthorPayload(SemanticScholarBaseModel):
    name: str | None = None


class ExternalIds(SemanticScholarBaseModel):
    doi: str | None = Field(default=None, alias="DOI")
    arxiv: str | None = Field(default=None, alias="ArXiv")

    _normalize_doi = field_validator("doi", mode="before")(_blank_to_none)


class PaperPayload(SemanticScholarBaseModel):
    paper_id: str | None = Field(default=None, alias="paperId")
    title: str | None = None
    authors: list[AuthorPayload] | None = None
    year: int | None = None
    external_ids: ExternalIds | None = Field(default=None, alias="externalIds")
    abstract: str | None = None
    url: str | None = None
    citation_count: int | None = Field(default=None, alias="citationCount")

    _normalize_abstract = field_validator("abstract", "url", mode="before")(_blank_to_none)


class SearchResponse(SemanticScholarBaseModel):
    total: int | None = None
    offset: int | None = None
    data: list[PaperPayload] | None = None


class CitationItem(SemanticScholarBaseModel):
    citing_paper: PaperPayload | None = Field(default=None, alias="citingPaper")
    cited_paper: PaperPayload | None = Field(default=None, alias="citedPaper")


class CitationsResponse(SemanticScholarBaseModel):
    data: list[CitationItem] | None = None
