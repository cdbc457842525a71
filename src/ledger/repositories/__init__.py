"""Repository layer - data access abstractions and implementations."""

from ledger.repositories.protocols import TransactionDataSource

__all__ = [
    "TransactionDataSource",
]
