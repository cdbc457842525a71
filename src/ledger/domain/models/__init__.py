"""Domain models package."""

from ledger.domain.models.enums import (
    TransactionNature,
    CashbackSource,
    CashbackMode,
    NATURE_FILTER_ALL,
    LEGACY_NATURE_ALIASES,
)
from ledger.domain.models.reference import Reference, CategoryRef, Account
from ledger.domain.models.transaction import (
    TransactionRow,
    TransactionRecord,
    TransactionCreate,
)
from ledger.domain.models.lookups import LookupTables, LedgerSnapshot

__all__ = [
    "TransactionNature",
    "CashbackSource",
    "CashbackMode",
    "NATURE_FILTER_ALL",
    "LEGACY_NATURE_ALIASES",
    "Reference",
    "CategoryRef",
    "Account",
    "TransactionRow",
    "TransactionRecord",
    "TransactionCreate",
    "LookupTables",
    "LedgerSnapshot",
]
