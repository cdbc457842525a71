"""Transaction row, canonical record and creation payload models."""

from dataclasses import dataclass, fields
from typing import Any, Optional

from ledger.domain.models.enums import TransactionNature
from ledger.domain.models.reference import Reference, CategoryRef


@dataclass(frozen=True)
class TransactionRow:
    """
    Raw transaction row as stored by a data source.

    Numeric columns may arrive as text or numbers and foreign keys are
    nullable ids; nothing here is validated. ``RecordNormalizer`` turns a
    row into a ``TransactionRecord``.
    """

    id: str
    date: str
    amount: Any = None
    final_price: Any = None
    notes: Optional[str] = None
    status: Optional[str] = None
    nature: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    person_id: Optional[str] = None
    category_id: Optional[str] = None
    shop_id: Optional[str] = None
    cashback_percent: Any = None
    cashback_amount: Any = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "TransactionRow":
        """Build a row from a dict, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class TransactionRecord:
    """
    Canonical ledger transaction, independent of where it was loaded from.

    Nature usage of accounts:
    - EX debits ``from_account``
    - IN credits ``to_account``
    - TF moves from ``from_account`` to a different ``to_account``
    - DEBT may use either side
    """

    id: str
    date: str
    amount: int
    nature: TransactionNature
    status: str = "Active"
    final_price: Optional[float] = None
    notes: Optional[str] = None
    from_account: Optional[Reference] = None
    to_account: Optional[Reference] = None
    category: Optional[CategoryRef] = None
    shop: Optional[Reference] = None
    person: Optional[Reference] = None
    cashback_percent: Optional[float] = None
    cashback_amount: Optional[float] = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.nature, str) and not isinstance(self.nature, TransactionNature):
            object.__setattr__(self, "nature", TransactionNature(self.nature))


@dataclass
class TransactionCreate:
    """Input data for creating a transaction."""

    amount: float
    date: str
    nature: TransactionNature
    notes: Optional[str] = None
    final_price: Optional[float] = None
    status: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    shop_id: Optional[str] = None
    person_id: Optional[str] = None
    cashback_percent: Optional[float] = None
    cashback_amount: Optional[float] = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.nature, str) and not isinstance(self.nature, TransactionNature):
            self.nature = TransactionNature(self.nature.upper())

    def to_row(self, txn_id: str) -> TransactionRow:
        """Build the row to insert, applying creation defaults."""
        return TransactionRow(
            id=txn_id,
            date=self.date,
            amount=self.amount,
            final_price=self.final_price if self.final_price is not None else self.amount,
            notes=self.notes,
            status=self.status or "Active",
            nature=self.nature.value,
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
            person_id=self.person_id,
            category_id=self.category_id,
            shop_id=self.shop_id,
            cashback_percent=self.cashback_percent,
            cashback_amount=self.cashback_amount,
            debt_tag=self.debt_tag,
            debt_cycle_tag=self.debt_cycle_tag,
        )
