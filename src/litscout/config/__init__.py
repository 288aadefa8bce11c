"""Application configuration helpers."""

from __future__ import annotations

from .agent import (
    AgentConfig,
    AgentState,
    DiscoveryStats,
    load_agent_config,
    load_agent_state,
    save_agent_config,
    save_agent_state,
)
from .env import optional_env_path, optional_env_var
from .errors import ConfigurationError
from .governance import (
    GovernanceConfig,
    apply_setting,
    load_governance_config,
    save_governance_config,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .literature import (
    OpenAlexConfig,
    SemanticScholarConfig,
    get_openalex_config,
    get_semantic_scholar_config,
)
from .logging import configure_logging
from .storage import DatabaseConfig, data_dir, get_database_config

__all__ = [
    "AgentConfig",
    "AgentState",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "DiscoveryStats",
    "GovernanceConfig",
    "OpenAlexConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SemanticScholarConfig",
    "apply_setting",
    "configure_logging",
    "data_dir",
    "get_database_config",
    "get_openalex_config",
    "get_semantic_scholar_config",
    "load_agent_config",
    "load_agent_state",
    "load_governance_config",
    "optional_env_path",
    "optional_env_var",
    "save_agent_config",
    "save_agent_state",
    "save_governance_config",
]
