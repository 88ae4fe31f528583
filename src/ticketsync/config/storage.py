"""Location of the local ticket store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_bool_env

APP_DIR_NAME: Final[str] = "ticketsync"
DEFAULT_DB_FILENAME: Final[str] = "tickets.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")


def data_dir() -> Path:
    """Directory for the default SQLite file: ``TICKETSYNC_DATA_DIR`` or the XDG data home."""

    configured = os.getenv("TICKETSYNC_DATA_DIR")
    if configured:
        return Path(configured).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / APP_DIR_NAME).expanduser().resolve()


def sqlite_uri(directory: Path, filename: str = DEFAULT_DB_FILENAME) -> str:
    directory.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{directory / filename}"


def get_database_config() -> DatabaseConfig:
    uri = os.getenv("DATABASE_URI") or sqlite_uri(data_dir())
    return DatabaseConfig(uri=uri, echo=optional_bool_env("TICKETSYNC_SQL_ECHO"))
