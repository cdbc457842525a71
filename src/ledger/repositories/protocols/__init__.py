"""Repository protocol definitions (interfaces)."""

from ledger.repositories.protocols.data_source import TransactionDataSource

__all__ = [
    "TransactionDataSource",
]
