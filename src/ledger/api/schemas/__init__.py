"""Pydantic schemas for API request/response."""

from ledger.api.schemas.transaction import (
    ReferenceResponse,
    CategoryResponse,
    AccountResponse,
    TransactionCreateRequest,
    TransactionResponse,
    TransactionListResponse,
    SupportDataResponse,
)
from ledger.api.schemas.cashback import (
    CashbackEventRequest,
    CashbackReconcileRequest,
    CashbackStateResponse,
)

__all__ = [
    "ReferenceResponse",
    "CategoryResponse",
    "AccountResponse",
    "TransactionCreateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "SupportDataResponse",
    "CashbackEventRequest",
    "CashbackReconcileRequest",
    "CashbackStateResponse",
]
