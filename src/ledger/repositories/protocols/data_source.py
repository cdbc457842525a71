"""Transaction data source protocol."""

from typing import Protocol

from ledger.domain.models import LedgerSnapshot, TransactionRow


class TransactionDataSource(Protocol):
    """
    Interface for a transaction backing store.

    Implementations raise ``DataSourceError`` when the transport fails.
    """

    name: str

    def fetch_snapshot(self) -> LedgerSnapshot:
        """Return all transaction rows together with the lookup tables."""
        ...

    def insert(self, row: TransactionRow) -> TransactionRow:
        """Persist a new row and return it as stored."""
        ...
