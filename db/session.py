"""
db/session.py

Lazily created SQLAlchemy engine and session factory for the planning DB.

Nothing connects at import time; the engine is built on the first
`get_engine()` / `SessionLocal()` call.
"""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import DatabaseSettings, get_database_settings


def _connect_args(settings: DatabaseSettings) -> dict[str, str]:
    options = f"-c statement_timeout={settings.statement_timeout_ms}"
    return {"application_name": settings.application_name, "options": options}


def create_db_engine(settings: DatabaseSettings | None = None) -> Engine:
    """Create the PostgreSQL engine. Other backends are rejected."""
    settings = settings or get_database_settings()
    if not settings.url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported by the planning service.")

    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle,
        connect_args=_connect_args(settings),
    )


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def _get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        # Planning reads after a commit re-query explicitly; keep loaded
        # objects usable after commit.
        _session_factory = sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


def SessionLocal() -> Session:
    return _get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
