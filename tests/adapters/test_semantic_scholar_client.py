from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from litscout.adapters.semantic_scholar import SemanticScholarAPIError, SemanticScholarClient
from litscout.adapters.semantic_scholar.client import PAPER_FIELDS, year_range_param
from litscout.config.literature import SemanticScholarConfig, get_semantic_scholar_config
from litscout.domain.model import SearchResult
from litscout.domain.ports import CitationDirection, SearchRequest
from tests.helpers.http import make_client_factory, resilience

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://s2.test/graph/v1/"

PAPER = {
    "paperId": "abc123",
    "title": " Ganzfeld telepathy meta-analysis ",
    "authors": [{"name": "A. Author"}, {"name": None}],
    "year": 2020,
    "externalIds": {"DOI": "10.1000/example", "ArXiv": None},
    "abstract": "   ",
    "url": "https://www.semanticscholar.org/paper/abc123",
}

EXPECTED = SearchResult(
    title="Ganzfeld telepathy meta-analysis",
    source="semantic-scholar",
    authors=("A. Author",),
    year=2020,
    doi="10.1000/example",
    url="https://www.semanticscholar.org/paper/abc123",
    semantic_scholar_id="abc123",
)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> SemanticScholarClient:
    return SemanticScholarClient(
        config=SemanticScholarConfig(resilience=resilience("semantic-scholar", BASE_URL)),
        client_factory=make_client_factory(handler),
    )


async def _search(client: SemanticScholarClient, request: SearchRequest) -> list[SearchResult]:
    async with client:
        return await client.search(request)


def test_search_sends_query_and_parses_papers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"total": 1, "offset": 0, "data": [PAPER]})

    request = SearchRequest(query="ganzfeld", api="semantic-scholar", limit=5, year_min=2000)

    results = asyncio.run(_search(_client(handler), request))

    assert results == [EXPECTED]
    [sent] = seen
    assert sent.url.path == "/graph/v1/paper/search"
    assert sent.url.params["query"] == "ganzfeld"
    assert sent.url.params["limit"] == "5"
    assert sent.url.params["offset"] == "0"
    assert sent.url.params["fields"] == PAPER_FIELDS
    assert sent.url.params["year"] == "2000-"


def test_search_without_data_is_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"total": 0})

    request = SearchRequest(query="nothing", api="semantic-scholar")

    assert asyncio.run(_search(_client(handler), request)) == []


def test_citations_read_citing_papers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"data": [{"citingPaper": PAPER}, {"citingPaper": None}]}
        )

    async def run() -> list[SearchResult]:
        async with _client(handler) as client:
            return await client.citations("10.1000/anchor", CitationDirection.CITING, 7)

    results = asyncio.run(run())

    assert results == [EXPECTED]
    assert seen[0].url.path.endswith("/citations")
    assert "10.1000/anchor" in seen[0].url.path
    assert seen[0].url.params["limit"] == "7"


def test_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    request = SearchRequest(query="ganzfeld", api="semantic-scholar")

    with pytest.raises(SemanticScholarAPIError) as exc_info:
        asyncio.run(_search(_client(handler), request))
    assert exc_info.value.status_code == 503


def test_unexpected_payload_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": "not-a-list"})

    request = SearchRequest(query="ganzfeld", api="semantic-scholar")

    with pytest.raises(SemanticScholarAPIError, match="Unexpected Semantic Scholar search"):
        asyncio.run(_search(_client(handler), request))


def test_year_range_param() -> None:
    assert year_range_param(None, None) is None
    assert year_range_param(2000, 2010) == "2000-2010"
    assert year_range_param(None, 2010) == "-2010"


def test_api_key_is_sent_as_header(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMANTIC_SCHOLAR_API_KEY", " secret ")

    config = get_semantic_scholar_config()

    assert config.api_key == "secret"
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["x-api-key"] == "secret"
