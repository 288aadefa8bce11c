"""Location of the optional SQL discovery log."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import DATA_DIR_ENV, DATABASE_URI_ENV, optional_env_path, optional_env_var

APP_DIR_NAME: Final[str] = "litscout"
DATABASE_FILENAME: Final[str] = "litscout.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Engine URI for ``--store sql``; ``data_dir`` stays ``None`` for an explicit URI."""

    uri: str
    data_dir: Path | None = None


def data_dir() -> Path:
    """Per-user data directory, overridden by ``$LITSCOUT_DATA_DIR``."""

    explicit = optional_env_path(DATA_DIR_ENV)
    if explicit is not None:
        return explicit.resolve()
    if os.name == "nt":
        base = optional_env_path("LOCALAPPDATA") or Path.home() / "AppData" / "Local"
    else:
        base = optional_env_path("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return (base / APP_DIR_NAME).resolve()


def get_database_config() -> DatabaseConfig:
    uri = optional_env_var(DATABASE_URI_ENV)
    if uri is not None:
        return DatabaseConfig(uri=uri)
    directory = data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(
        uri=f"sqlite+pysqlite:///{directory / DATABASE_FILENAME}", data_dir=directory
    )
