"""SQLAlchemy repository implementations."""

from ledger.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    reset_database,
    Base,
)
from ledger.repositories.sqlalchemy.data_source import SqlAlchemyDataSource

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyDataSource",
]
