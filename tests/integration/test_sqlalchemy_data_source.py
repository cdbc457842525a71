"""
Integration tests for the SQLAlchemy data source on SQLite.

Tests cover:
- Snapshot loading (rows newest first, lookup tables)
- Inserting rows
- Driver failures surfacing as DataSourceError
- LedgerService over the database, including fallback on failure
- Startup against an unreachable database
"""

import logging
from decimal import Decimal

import pytest

from ledger.config.settings import Settings, set_settings
from ledger.core.exceptions import DataSourceError
from ledger.domain.models import TransactionCreate, TransactionNature, TransactionRow
from ledger.repositories.sqlalchemy import Base, SqlAlchemyDataSource
from ledger.repositories.sqlalchemy.database import init_db
from ledger.services import LedgerQuery, LedgerService
from ledger.services.normalizer import normalize_row


class TestFetchSnapshot:
    """Tests for reading from the database."""

    def test_rows_newest_first(self, seeded_sql_source: SqlAlchemyDataSource):
        snapshot = seeded_sql_source.fetch_snapshot()

        assert [r.id for r in snapshot.rows] == ["txn-seed-1", "txn-seed-2", "txn-seed-3", "txn-seed-4"]

    def test_lookups_loaded(self, seeded_sql_source: SqlAlchemyDataSource):
        """
        GIVEN the seeded lookup tables
        WHEN a snapshot is fetched
        THEN accounts keep their cashback settings and categories their nature
        """
        lookups = seeded_sql_source.fetch_snapshot().lookups

        card = lookups.account("acc-credit")
        assert card.is_cashback_eligible is True
        assert card.cashback_percentage == pytest.approx(0.05)
        assert card.max_cashback_amount == 300000
        assert lookups.category("cat-salary").nature == TransactionNature.IN
        assert lookups.shop("shop-grab").name == "Grab"
        assert lookups.person("person-linh").name == "Linh"

    def test_numeric_columns_normalize(self, seeded_sql_source: SqlAlchemyDataSource):
        """
        GIVEN amounts stored as NUMERIC
        WHEN normalized
        THEN they become whole numbers
        """
        snapshot = seeded_sql_source.fetch_snapshot()

        record = normalize_row(snapshot.rows[0], snapshot.lookups)

        assert record.amount == 320000
        assert record.cashback_amount == 16000
        assert record.shop.name == "Co.op Mart"

    def test_empty_database(self, sql_source: SqlAlchemyDataSource):
        snapshot = sql_source.fetch_snapshot()

        assert snapshot.rows == ()
        assert snapshot.lookups.accounts == {}

    def test_missing_tables_raise_data_source_error(self, sql_source: SqlAlchemyDataSource, test_engine):
        """
        GIVEN a database whose tables were dropped
        WHEN a snapshot is fetched
        THEN DataSourceError carries the driver message
        """
        Base.metadata.drop_all(bind=test_engine)

        with pytest.raises(DataSourceError) as exc_info:
            sql_source.fetch_snapshot()

        assert "no such table" in exc_info.value.message


class TestInsert:
    """Tests for writing to the database."""

    def test_insert_round_trips_row(self, seeded_sql_source: SqlAlchemyDataSource):
        row = TransactionRow(
            id="txn-new",
            date="2024-06-16T08:00:00+07:00",
            amount=45000,
            final_price=45000,
            notes="Grab bike",
            status="Active",
            nature="EX",
            from_account_id="acc-wallet",
            shop_id="shop-grab",
        )

        stored = seeded_sql_source.insert(row)

        assert stored.id == "txn-new"
        assert Decimal(stored.amount) == Decimal("45000")
        assert seeded_sql_source.fetch_snapshot().rows[0].id == "txn-new"

    def test_duplicate_id_raises_data_source_error(self, seeded_sql_source: SqlAlchemyDataSource):
        """
        GIVEN an existing transaction id
        WHEN a row with the same id is inserted
        THEN DataSourceError is raised and the session stays usable
        """
        with pytest.raises(DataSourceError):
            seeded_sql_source.insert(TransactionRow(id="txn-seed-1", date="2024-06-16", amount=1))

        assert len(seeded_sql_source.fetch_snapshot().rows) == 4


class TestServiceOverDatabase:
    """Tests for LedgerService backed by SQLite."""

    def test_create_and_list(self, ledger_service: LedgerService, fixed_now):
        """
        GIVEN the seeded database
        WHEN an income is created and incomes are listed
        THEN both incomes are returned, the new one first
        """
        created = ledger_service.create_transaction(
            TransactionCreate(
                amount=2_000_000,
                date="2024-06-16T09:00:00+07:00",
                nature=TransactionNature.IN,
                to_account_id="acc-salary",
                category_id="cat-salary",
                notes="Thưởng",
            )
        )

        result = ledger_service.list_transactions(LedgerQuery(nature="IN"))

        assert created.ok
        assert result.total == 2
        assert result.data[0].id == created.data.id
        assert result.data[0].amount == 2_000_000
        assert result.error is None

    def test_search_across_database_rows(self, ledger_service: LedgerService):
        result = ledger_service.list_transactions(LedgerQuery(search="minh"))

        assert [r.id for r in result.data] == ["txn-seed-4"]

    def test_database_outage_serves_last_known(self, ledger_service: LedgerService, test_engine):
        """
        GIVEN a service that has read the database once
        WHEN the tables disappear
        THEN the previously read rows are served with an advisory error
        """
        ledger_service.list_transactions()
        Base.metadata.drop_all(bind=test_engine)

        result = ledger_service.list_transactions()

        assert result.total == 4
        assert "no such table" in result.error


class TestInitDb:
    """Tests for table creation at startup."""

    def test_unreachable_store_does_not_raise(self, caplog):
        """
        GIVEN a database URL that cannot be opened
        WHEN tables are created at startup
        THEN a warning is logged instead of an exception
        """
        set_settings(Settings(_env_file=None, database_url="sqlite:////nonexistent_dir_for_ledger_tests/ledger.db"))

        with caplog.at_level(logging.WARNING, logger="ledger.repositories.sqlalchemy.database"):
            init_db()

        assert "Could not initialise remote store" in caplog.text
