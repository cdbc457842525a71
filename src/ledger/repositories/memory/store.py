"""In-memory fallback data source."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ledger.core.timezone import now_local
from ledger.domain.models import (
    Account,
    CategoryRef,
    LedgerSnapshot,
    LookupTables,
    Reference,
    TransactionNature,
    TransactionRow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreVersion:
    """
    One immutable generation of the fallback collection.

    Writes never touch an existing version; they produce the next one.
    """

    version: int = 0
    rows: tuple[TransactionRow, ...] = ()
    lookups: LookupTables = field(default_factory=LookupTables)

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(rows=self.rows, lookups=self.lookups)


class InMemoryDataSource:
    """
    Process-local transaction store used when the remote store is
    unavailable.

    The collection is copy-on-write: ``insert`` prepends to a new tuple and
    swaps the current version, so a reader holding a snapshot keeps seeing
    exactly what it read.
    """

    name = "memory"

    def __init__(
        self,
        rows: Iterable[TransactionRow] = (),
        lookups: Optional[LookupTables] = None,
    ):
        self._current = StoreVersion(
            version=0,
            rows=tuple(rows),
            lookups=lookups or LookupTables(),
        )

    @property
    def current(self) -> StoreVersion:
        return self._current

    @property
    def version(self) -> int:
        return self._current.version

    def fetch_snapshot(self) -> LedgerSnapshot:
        return self._current.snapshot()

    def insert(self, row: TransactionRow) -> TransactionRow:
        """Prepend ``row`` in a new version of the collection."""
        current = self._current
        self._current = replace(
            current,
            version=current.version + 1,
            rows=(row,) + current.rows,
        )
        return row

    def replace_all(
        self,
        rows: Iterable[TransactionRow],
        lookups: Optional[LookupTables] = None,
    ) -> StoreVersion:
        """Substitute the whole collection (and optionally the lookups)."""
        current = self._current
        self._current = StoreVersion(
            version=current.version + 1,
            rows=tuple(rows),
            lookups=lookups if lookups is not None else current.lookups,
        )
        logger.debug("Fallback store replaced with %d rows", len(self._current.rows))
        return self._current


# =============================================================================
# SEED DATA
# =============================================================================


SEED_ACCOUNTS = [
    Account(id="acc-wallet", name="Ví tiền mặt", type="cash"),
    Account(
        id="acc-credit",
        name="Thẻ tín dụng",
        type="credit",
        is_cashback_eligible=True,
        cashback_percentage=0.05,
        max_cashback_amount=300000,
    ),
    Account(id="acc-savings", name="Tiết kiệm", type="savings"),
    Account(
        id="acc-salary",
        name="Tài khoản lương",
        type="bank",
        is_cashback_eligible=True,
        cashback_percentage=0.015,
        max_cashback_amount=200000,
    ),
]

SEED_CATEGORIES = [
    CategoryRef(id="cat-grocery", name="Đi chợ", nature=TransactionNature.EX),
    CategoryRef(id="cat-salary", name="Lương", nature=TransactionNature.IN),
    CategoryRef(id="cat-transfer", name="Chuyển khoản", nature=TransactionNature.TF),
    CategoryRef(id="cat-debt", name="Thu nợ", nature=TransactionNature.DEBT),
]

SEED_SHOPS = [
    Reference(id="shop-coop", name="Co.op Mart"),
    Reference(id="shop-grab", name="Grab"),
    Reference(id="shop-book", name="Book Haven"),
]

SEED_PEOPLE = [
    Reference(id="person-minh", name="Minh"),
    Reference(id="person-linh", name="Linh"),
]


def seed_lookups() -> LookupTables:
    return LookupTables.from_lists(
        accounts=SEED_ACCOUNTS,
        categories=SEED_CATEGORIES,
        shops=SEED_SHOPS,
        people=SEED_PEOPLE,
    )


def seed_rows(now: Optional[datetime] = None) -> list[TransactionRow]:
    """Sample transactions dated relative to ``now``."""
    now = now or now_local()

    def days_ago(days: int) -> str:
        return (now - timedelta(days=days)).isoformat()

    return [
        TransactionRow(
            id="txn-seed-1",
            date=days_ago(0),
            amount=320000,
            final_price=320000,
            notes="Mua thực phẩm cuối tuần",
            status="Active",
            nature="EX",
            from_account_id="acc-credit",
            category_id="cat-grocery",
            shop_id="shop-coop",
            cashback_percent=5,
            cashback_amount=16000,
        ),
        TransactionRow(
            id="txn-seed-2",
            date=days_ago(3),
            amount=18500000,
            final_price=18500000,
            notes="Lương tháng",
            status="Active",
            nature="IN",
            to_account_id="acc-salary",
            category_id="cat-salary",
        ),
        TransactionRow(
            id="txn-seed-3",
            date=days_ago(10),
            amount=2500000,
            final_price=2500000,
            notes="Chuyển tiền tiết kiệm",
            status="Active",
            nature="TF",
            from_account_id="acc-salary",
            to_account_id="acc-savings",
            category_id="cat-transfer",
        ),
        TransactionRow(
            id="txn-seed-4",
            date=days_ago(20),
            amount=1200000,
            final_price=1200000,
            notes="Cho Minh mượn",
            status="Active",
            nature="DEBT",
            from_account_id="acc-wallet",
            category_id="cat-debt",
            person_id="person-minh",
            debt_tag="MINH-2024",
            debt_cycle_tag="2024-Q4",
        ),
    ]


def create_seeded_store(now: Optional[datetime] = None) -> InMemoryDataSource:
    """Build a fallback store populated with the sample dataset."""
    return InMemoryDataSource(rows=seed_rows(now), lookups=seed_lookups())
