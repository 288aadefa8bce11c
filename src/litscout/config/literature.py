"""Literature API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import OPENALEX_MAILTO_ENV, SEMANTIC_SCHOLAR_API_KEY_ENV, optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

SEMANTIC_SCHOLAR_BASE_URL = "https://api.semanticscholar.org/graph/v1/"
OPENALEX_BASE_URL = "https://api.openalex.org/"
USER_AGENT = "litscout-literature (https://github.com/litscout/litscout)"


@dataclass(frozen=True, slots=True)
class SemanticScholarConfig:
    resilience: ResilienceConfig
    api_key: str | None = None


@dataclass(frozen=True, slots=True)
class OpenAlexConfig:
    resilience: ResilienceConfig
    mailto: str | None = None


def get_semantic_scholar_config(
    *, resilience: ResilienceConfig | None = None
) -> SemanticScholarConfig:
    api_key = optional_env_var(SEMANTIC_SCHOLAR_API_KEY_ENV)
    headers = {"User-Agent": USER_AGENT}
    if api_key is not None:
        headers["x-api-key"] = api_key
    return SemanticScholarConfig(
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="semantic-scholar",
            base_url=SEMANTIC_SCHOLAR_BASE_URL,
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            cache=CacheConfig(),
            default_headers=headers,
        ),
    )


def get_openalex_config(*, resilience: ResilienceConfig | None = None) -> OpenAlexConfig:
    mailto = optional_env_var(OPENALEX_MAILTO_ENV)
    user_agent = f"{USER_AGENT}; mailto:{mailto}" if mailto else USER_AGENT
    return OpenAlexConfig(
        mailto=mailto,
        resilience=resilience
        or ResilienceConfig(
            name="openalex",
            base_url=OPENALEX_BASE_URL,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=CacheConfig(),
            default_headers={"User-Agent": user_agent},
        ),
    )
