"""Environment variables read by litscout."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

GRAPH_FILE_ENV: Final[str] = "LITSCOUT_GRAPH_FILE"
DATA_DIR_ENV: Final[str] = "LITSCOUT_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "LITSCOUT_DATABASE_URI"
SEMANTIC_SCHOLAR_API_KEY_ENV: Final[str] = "SEMANTIC_SCHOLAR_API_KEY"
OPENALEX_MAILTO_ENV: Final[str] = "OPENALEX_MAILTO"


def optional_env_var(name: str) -> str | None:
    """Return an environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def optional_env_path(name: str) -> Path | None:
    value = optional_env_var(name)
    return Path(value).expanduser() if value is not None else None
