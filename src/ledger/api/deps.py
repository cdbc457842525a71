"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ledger.app_context import build_ledger_service
from ledger.config.settings import Settings, get_settings
from ledger.repositories.sqlalchemy.database import get_db
from ledger.services import LedgerService


def get_app_settings() -> Settings:
    """Provide the current Settings instance."""
    return get_settings()


def get_ledger_service(
    db: Optional[Session] = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> LedgerService:
    """Provide LedgerService bound to the remote store or the fallback."""
    return build_ledger_service(session=db, settings=settings)
