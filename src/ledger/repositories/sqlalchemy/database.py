"""Database connection and session management."""

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from ledger.config.settings import get_settings
from ledger.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Base = declarative_base()

# Module-level database state (can be reconfigured at runtime)
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _connect_args(url: str) -> dict:
    # SQLite-specific
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


def get_engine() -> Engine:
    """Get or create the database engine for the configured remote store."""
    global _engine
    if _engine is None:
        settings = get_settings()
        if not settings.is_remote_configured:
            raise ConfigurationError(settings.configuration_warning())
        url = settings.database_url.strip()
        _engine = create_engine(url, connect_args=_connect_args(url), echo=False)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_db() -> Generator[Optional[Session], None, None]:
    """
    Dependency that provides a database session.

    Yields None when no remote store is configured so callers can fall back.
    """
    if not get_settings().is_remote_configured:
        yield None
        return
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Create tables in the remote store, if one is configured.

    An unreachable store is logged and left alone; requests then serve
    the fallback store until it comes back.
    """
    if not get_settings().is_remote_configured:
        return
    from ledger.repositories.sqlalchemy import orm_models  # noqa: F401

    try:
        Base.metadata.create_all(bind=get_engine())
    except SQLAlchemyError as exc:
        logger.warning("Could not initialise remote store: %s", exc)


def reset_database() -> None:
    """Reset database state (for reconfiguration)."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _SessionLocal = None
