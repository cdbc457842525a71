"""API routers package."""

from ledger.api.routers.transactions import router as transactions_router
from ledger.api.routers.numerals import router as numerals_router
from ledger.api.routers.cashback import router as cashback_router

__all__ = [
    "transactions_router",
    "numerals_router",
    "cashback_router",
]
