"""
Database connection and session management.
Handles SQLAlchemy engine setup, connection pooling, and per-request session lifecycle.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

logger = logging.getLogger(__name__)


def create_db_engine(dsn: str, echo: bool = False) -> Engine:
    """
    Build the process-wide engine.
    - SQLite gets check_same_thread=False (FastAPI runs sync handlers in a threadpool)
      and a StaticPool when in-memory so every connection sees the same database.
    - Server databases get a QueuePool with pre-ping and recycle.
    """
    url = make_url(dsn)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, echo=echo, **kwargs)

    return create_engine(
        url,
        future=True,
        poolclass=QueuePool,
        pool_size=20,
        max_overflow=30,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=echo,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False keeps attributes accessible after repo commits
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        future=True,
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a DB session from the app's session factory.
    - On normal exit: commits (no-op if repos already committed).
    - On exception: rollbacks.
    """
    db = request.app.state.session_factory()
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Context manager for manual session management (startup tasks, tests).
    Mirrors get_db() semantics.
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.error(f"Database context error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def redacted_dsn(dsn: str) -> str:
    """
    Redact password in a DATABASE_URL for safe logging.
    """
    try:
        url = make_url(dsn)
        return url.render_as_string(hide_password=True)
    except Exception:
        return "<unparsable DSN>"


def log_where_am_i(engine: Engine) -> None:
    """Log which backend/database/host the engine points at. Safe to call in app startup."""
    url = engine.url
    logger.warning(
        f"DB engine -> dsn={redacted_dsn(str(url))} | backend={url.get_backend_name()} "
        f"| db={url.database} | host={url.host} | port={url.port}"
    )
