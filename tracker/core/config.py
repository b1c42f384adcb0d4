"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

from sqlalchemy.engine import make_url

DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8080
DEFAULT_LOG_LEVEL = "error"
DEFAULT_LOG_FILE_PATH = "app.log"
DEFAULT_DATABASE_URL = "sqlite:///./tracker.db"
DEFAULT_DB_MAX_CONNECTIONS = 4
DEFAULT_DB_MIN_CONNECTIONS = 2


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def redact_database_url(url: str) -> str:
    """Return the database URL with any password hidden."""
    return make_url(url).render_as_string(hide_password=True)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the HTTP server, logging, and database pool."""

    server_host: str
    server_port: int
    log_level: str
    log_file_path: str
    database_url: str
    db_max_connections: int
    db_min_connections: int

    def safe_for_logging(self) -> dict[str, str | int]:
        """Return settings safe for logs."""
        return {
            "server_host": self.server_host,
            "server_port": self.server_port,
            "log_level": self.log_level,
            "log_file_path": self.log_file_path,
            "database_url": redact_database_url(self.database_url),
            "db_max_connections": self.db_max_connections,
            "db_min_connections": self.db_min_connections,
        }


def load_settings() -> Settings:
    """Read settings from the environment without caching."""
    return Settings(
        server_host=os.getenv("TRACKER_SERVER_HOST", DEFAULT_SERVER_HOST),
        server_port=_get_int_env("TRACKER_SERVER_PORT", DEFAULT_SERVER_PORT),
        log_level=os.getenv("TRACKER_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        log_file_path=os.getenv("TRACKER_LOG_FILE_PATH", DEFAULT_LOG_FILE_PATH),
        database_url=os.getenv("TRACKER_DATABASE_URL", DEFAULT_DATABASE_URL),
        db_max_connections=_get_int_env("TRACKER_DB_MAX_CONNECTIONS", DEFAULT_DB_MAX_CONNECTIONS),
        db_min_connections=_get_int_env("TRACKER_DB_MIN_CONNECTIONS", DEFAULT_DB_MIN_CONNECTIONS),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment once per process."""
    return load_settings()
