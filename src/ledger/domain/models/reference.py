"""Lookup entities referenced by transactions."""

from dataclasses import dataclass
from typing import Optional

from ledger.domain.models.enums import TransactionNature


@dataclass(frozen=True)
class Reference:
    """Resolved foreign key: identifier plus display name."""

    id: str
    name: str


@dataclass(frozen=True)
class CategoryRef:
    """Category reference carrying the nature it implies."""

    id: str
    name: str
    nature: TransactionNature = TransactionNature.EX

    def __post_init__(self) -> None:
        if isinstance(self.nature, str) and not isinstance(self.nature, TransactionNature):
            object.__setattr__(self, "nature", TransactionNature(self.nature))


@dataclass(frozen=True)
class Account:
    """
    Money account (wallet, bank, credit card).

    ``cashback_percentage`` is a fraction (0.05 = 5%). A missing percentage
    means the cashback is limited only by ``max_cashback_amount`` and the
    transaction amount itself.
    """

    id: str
    name: str
    type: Optional[str] = None
    is_cashback_eligible: bool = False
    cashback_percentage: Optional[float] = None
    max_cashback_amount: Optional[float] = None

    def as_reference(self) -> Reference:
        return Reference(id=self.id, name=self.name)
