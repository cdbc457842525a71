"""
Pytest configuration and fixtures for money ledger tests.

This module provides:
- In-memory SQLite database fixtures
- Seeded SQLAlchemy and in-memory data sources
- A data source that always fails, for fallback tests
- Time helpers for the ledger timezone
- Service fixtures and the API test client
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from ledger.main import app
from ledger.api.deps import get_app_settings
from ledger.app_context import reset_fallback_store
from ledger.config.settings import Settings, reset_settings
from ledger.core.exceptions import DataSourceError
from ledger.core.timezone import local_tz
from ledger.domain.models import (
    Account,
    LedgerSnapshot,
    Reference,
    TransactionNature,
    TransactionRecord,
    TransactionRow,
)
from ledger.repositories.memory import InMemoryDataSource, create_seeded_store, seed_lookups, seed_rows
from ledger.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from ledger.repositories.sqlalchemy import orm_models  # noqa: F401
from ledger.repositories.sqlalchemy import SqlAlchemyDataSource
from ledger.services import LedgerService


# =============================================================================
# GLOBAL STATE
# =============================================================================


@pytest.fixture(autouse=True)
def reset_globals():
    """Start every test with fresh settings, no cached engine and a freshly seeded fallback store."""
    reset_settings()
    reset_database()
    reset_fallback_store()
    yield
    reset_settings()
    reset_database()
    reset_fallback_store()


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def local_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in the ledger timezone."""
    return local_tz().localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return local_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


def seed_database(source: SqlAlchemyDataSource, now: Optional[datetime] = None) -> None:
    """Load the sample lookups and transactions into an empty database."""
    lookups = seed_lookups()
    for account in lookups.accounts.values():
        source.add_account(account)
    for category in lookups.categories.values():
        source.add_category(category)
    for shop in lookups.shops.values():
        source.add_shop(shop)
    for person in lookups.people.values():
        source.add_person(person)
    for row in seed_rows(now):
        source.insert(row)


# =============================================================================
# DATA SOURCE FIXTURES
# =============================================================================


class FailingDataSource:
    """Data source whose transport is always down."""

    name = "failing"

    def __init__(self, message: str = "connection refused"):
        self.message = message
        self.insert_calls = 0

    def fetch_snapshot(self) -> LedgerSnapshot:
        raise DataSourceError(self.message)

    def insert(self, row: TransactionRow) -> TransactionRow:
        self.insert_calls += 1
        raise DataSourceError(self.message)


@pytest.fixture
def sql_source(test_session) -> SqlAlchemyDataSource:
    """Provide an empty SQLAlchemy data source."""
    return SqlAlchemyDataSource(test_session)


@pytest.fixture
def seeded_sql_source(sql_source, fixed_now) -> SqlAlchemyDataSource:
    """Provide a SQLAlchemy data source holding the sample dataset."""
    seed_database(sql_source, fixed_now)
    return sql_source


@pytest.fixture
def memory_store(fixed_now) -> InMemoryDataSource:
    """Provide a fallback store seeded relative to ``fixed_now``."""
    return create_seeded_store(fixed_now)


@pytest.fixture
def failing_source() -> FailingDataSource:
    """Provide a data source that always fails."""
    return FailingDataSource()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def memory_service(memory_store) -> LedgerService:
    """LedgerService running on the in-memory store only."""
    return LedgerService(source=memory_store)


@pytest.fixture
def ledger_service(seeded_sql_source, memory_store) -> LedgerService:
    """LedgerService backed by the seeded database with the memory fallback."""
    return LedgerService(source=seeded_sql_source, fallback=memory_store)


@pytest.fixture
def degraded_service(failing_source, memory_store) -> LedgerService:
    """LedgerService whose remote store is unreachable."""
    return LedgerService(source=failing_source, fallback=memory_store)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def record_factory() -> Callable[..., TransactionRecord]:
    """Factory for canonical records, one per call with increasing ids."""
    counter = {"next": 0}

    def _create_record(
        date: str = "2024-06-01T10:00:00",
        amount: int = 100000,
        nature: TransactionNature = TransactionNature.EX,
        notes: Optional[str] = None,
        status: str = "Active",
        from_account: Optional[Reference] = None,
        to_account: Optional[Reference] = None,
        record_id: Optional[str] = None,
        **extra,
    ) -> TransactionRecord:
        counter["next"] += 1
        return TransactionRecord(
            id=record_id or f"rec-{counter['next']:03d}",
            date=date,
            amount=amount,
            nature=nature,
            notes=notes,
            status=status,
            from_account=from_account,
            to_account=to_account,
            **extra,
        )

    return _create_record


@pytest.fixture
def credit_card() -> Account:
    """Cashback card: 5% capped at 30,000 per transaction."""
    return Account(
        id="acc-card",
        name="Visa Cashback",
        type="credit",
        is_cashback_eligible=True,
        cashback_percentage=0.05,
        max_cashback_amount=30000,
    )


@pytest.fixture
def debit_card() -> Account:
    """Account without cashback."""
    return Account(id="acc-debit", name="Debit", type="bank")


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


def _client_for(test_engine, settings: Settings, seed: bool = True):
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    if seed:
        session = TestSessionLocal()
        try:
            seed_database(SqlAlchemyDataSource(session), now=datetime.now(local_tz()) - timedelta(minutes=1))
        finally:
            session.close()

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_app_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def client(test_engine) -> TestClient:
    """Provide FastAPI test client with a seeded test database."""
    settings = Settings(database_url="sqlite://")
    with _client_for(test_engine, settings) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(test_engine) -> TestClient:
    """Provide FastAPI test client with no remote store configured."""
    settings = Settings(database_url=None)
    with _client_for(test_engine, settings, seed=False) as c:
        yield c
    app.dependency_overrides.clear()
