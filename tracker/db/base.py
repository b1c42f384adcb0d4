"""Database engine and session helpers."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from tracker.core.config import Settings
from tracker.core.config import get_settings


def build_engine(settings: Settings) -> Engine:
    """Create an engine sized from the configured connection bounds."""
    url = make_url(settings.database_url)
    options: dict[str, Any] = {"pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_min_connections
        options["max_overflow"] = max(settings.db_max_connections - settings.db_min_connections, 0)

    return create_engine(url, **options)


engine = build_engine(get_settings())

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
)


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

