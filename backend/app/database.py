"""Database connection helpers for the Money Routine backend.

Unlike the market-data side, the database is optional: when DATABASE_URL is
not configured the application runs on the in-memory storage backend. When a
URL is given, this module builds the SQLAlchemy engine and session factory
used by ``SqlAlchemyBackend``.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


# Declarative base for ORM models
Base = declarative_base()


def _is_in_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in url)


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    In-memory SQLite databases live inside a single connection, so they are
    pinned to one shared connection (StaticPool); otherwise every session
    would see an empty database.
    """
    kwargs = {"future": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_in_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True  # validates connections from the pool
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
