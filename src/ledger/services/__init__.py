"""Service layer - business logic orchestration."""

from ledger.services.normalizer import RecordNormalizer, normalize_row, normalize_nature, parse_number
from ledger.services.query_engine import LedgerQuery, QueryResult, query_transactions
from ledger.services.cashback import (
    CashbackChange,
    CashbackLimits,
    CashbackReconciler,
    CashbackState,
    cashback_hint,
    transition,
)
from ledger.services.ledger_service import (
    LedgerService,
    ListResult,
    CreateResult,
    SupportData,
)

__all__ = [
    "RecordNormalizer",
    "normalize_row",
    "normalize_nature",
    "parse_number",
    "LedgerQuery",
    "QueryResult",
    "query_transactions",
    "CashbackChange",
    "CashbackLimits",
    "CashbackReconciler",
    "CashbackState",
    "cashback_hint",
    "transition",
    "LedgerService",
    "ListResult",
    "CreateResult",
    "SupportData",
]
