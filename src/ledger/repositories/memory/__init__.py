"""In-memory repository implementation."""

from ledger.repositories.memory.store import (
    InMemoryDataSource,
    StoreVersion,
    create_seeded_store,
    seed_lookups,
    seed_rows,
)

__all__ = [
    "InMemoryDataSource",
    "StoreVersion",
    "create_seeded_store",
    "seed_lookups",
    "seed_rows",
]
