"""Pydantic models describing the OpenAlex works API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class OpenAlexBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AuthorRef(OpenAlexBaseModel):
    display_name: str | None = None


class Authorship(OpenAlexBaseModel):
    author: AuthorRef | None = None


class WorkIds(OpenAlexBaseModel):
    openalex: str | None = None
    doi: str | None = None


class WorkPayload(OpenAlexBaseModel):
    id: str
    title: str | None = None
    authorships: list[Authorship] | None = None
    publication_year: int | None = None
    doi: str | None = None
    ids: WorkIds | None = None
    abstract_inverted_index: dict[str, list[int]] | None = None
    cited_by_count: int | None = None


class WorksResponse(OpenAlexBaseModel):
    results: list[WorkPayload] | None = None
