"""Application context: selects the data source and builds the ledger service.

The remote store is chosen at construction time. Without a configured
database URL the in-memory fallback store becomes the primary source and
every result carries the configuration message.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ledger.config.settings import Settings, get_settings
from ledger.repositories.memory import InMemoryDataSource, create_seeded_store
from ledger.repositories.sqlalchemy import SqlAlchemyDataSource
from ledger.services import LedgerService

logger = logging.getLogger(__name__)

# Process-wide fallback store, shared by every service instance
_fallback_store: Optional[InMemoryDataSource] = None


def get_fallback_store() -> InMemoryDataSource:
    """Get or create the process-wide fallback store."""
    global _fallback_store
    if _fallback_store is None:
        _fallback_store = create_seeded_store()
    return _fallback_store


def reset_fallback_store() -> None:
    """Drop the fallback store so the next access re-seeds it."""
    global _fallback_store
    _fallback_store = None


def build_ledger_service(
    session: Optional[Session] = None,
    settings: Optional[Settings] = None,
    fallback: Optional[InMemoryDataSource] = None,
) -> LedgerService:
    """
    Build a LedgerService for the current configuration.

    Args:
        session: Database session for the remote store, if one is configured
        settings: Settings to use (defaults to the global instance)
        fallback: Fallback store (defaults to the process-wide one)
    """
    settings = settings or get_settings()
    fallback = fallback or get_fallback_store()

    if session is None or not settings.is_remote_configured:
        warning = settings.configuration_warning() or "Remote store session unavailable."
        logger.debug("Using in-memory ledger store: %s", warning)
        return LedgerService(source=fallback, fallback=fallback, source_warning=warning)

    return LedgerService(source=SqlAlchemyDataSource(session), fallback=fallback)
