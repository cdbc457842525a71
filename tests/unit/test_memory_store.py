"""
Unit tests for the in-memory fallback store.

Tests cover:
- Seed data
- Copy-on-write inserts
- Whole-collection replacement
"""

from ledger.domain.models import TransactionRow
from ledger.repositories.memory import InMemoryDataSource, seed_lookups, seed_rows


class TestSeedData:
    """Tests for the sample dataset."""

    def test_seed_rows_dated_relative_to_now(self, fixed_now):
        rows = seed_rows(fixed_now)

        assert [r.id for r in rows] == ["txn-seed-1", "txn-seed-2", "txn-seed-3", "txn-seed-4"]
        assert rows[0].date == fixed_now.isoformat()

    def test_seed_lookups_cover_row_references(self, fixed_now):
        """
        GIVEN the seed rows and lookups
        WHEN resolving every referenced id
        THEN each one exists
        """
        lookups = seed_lookups()

        for row in seed_rows(fixed_now):
            for account_id in (row.from_account_id, row.to_account_id):
                if account_id:
                    assert lookups.account(account_id) is not None
            assert lookups.category(row.category_id) is not None


class TestCopyOnWrite:
    """Tests for versioned writes."""

    def test_insert_prepends_in_new_version(self, memory_store: InMemoryDataSource):
        """
        GIVEN a seeded store
        WHEN a row is inserted
        THEN a new version holds the row first, followed by the old rows
        """
        before = memory_store.current
        row = TransactionRow(id="new", date="2024-06-16", amount=1)

        memory_store.insert(row)

        after = memory_store.current
        assert after.version == before.version + 1
        assert after.rows[0] is row
        assert after.rows[1:] == before.rows

    def test_old_snapshot_unchanged_after_insert(self, memory_store: InMemoryDataSource):
        """
        GIVEN a reader holding a snapshot
        WHEN a row is inserted
        THEN the reader's snapshot does not change
        """
        snapshot = memory_store.fetch_snapshot()
        count = len(snapshot.rows)

        memory_store.insert(TransactionRow(id="new", date="2024-06-16", amount=1))

        assert len(snapshot.rows) == count
        assert all(r.id != "new" for r in snapshot.rows)

    def test_replace_all_keeps_lookups_by_default(self, memory_store: InMemoryDataSource):
        """
        GIVEN a seeded store
        WHEN the rows are replaced without lookups
        THEN the lookups are kept and the version advances
        """
        lookups = memory_store.current.lookups
        version = memory_store.version

        memory_store.replace_all([TransactionRow(id="only", date="2024-01-01", amount=5)])

        assert memory_store.version == version + 1
        assert memory_store.current.lookups is lookups
        assert [r.id for r in memory_store.fetch_snapshot().rows] == ["only"]

    def test_empty_store(self):
        store = InMemoryDataSource()

        snapshot = store.fetch_snapshot()

        assert snapshot.rows == ()
        assert snapshot.lookups.accounts == {}
