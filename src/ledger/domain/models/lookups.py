"""Lookup tables used to resolve transaction foreign keys."""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ledger.domain.models.reference import Account, CategoryRef, Reference
from ledger.domain.models.transaction import TransactionRow


@dataclass(frozen=True)
class LookupTables:
    """Id-keyed maps of accounts, categories, shops and people."""

    accounts: Mapping[str, Account] = field(default_factory=dict)
    categories: Mapping[str, CategoryRef] = field(default_factory=dict)
    shops: Mapping[str, Reference] = field(default_factory=dict)
    people: Mapping[str, Reference] = field(default_factory=dict)

    @classmethod
    def from_lists(
        cls,
        accounts: Iterable[Account] = (),
        categories: Iterable[CategoryRef] = (),
        shops: Iterable[Reference] = (),
        people: Iterable[Reference] = (),
    ) -> "LookupTables":
        return cls(
            accounts={a.id: a for a in accounts},
            categories={c.id: c for c in categories},
            shops={s.id: s for s in shops},
            people={p.id: p for p in people},
        )

    def account(self, account_id: Optional[str]) -> Optional[Account]:
        return self.accounts.get(account_id) if account_id else None

    def category(self, category_id: Optional[str]) -> Optional[CategoryRef]:
        return self.categories.get(category_id) if category_id else None

    def shop(self, shop_id: Optional[str]) -> Optional[Reference]:
        return self.shops.get(shop_id) if shop_id else None

    def person(self, person_id: Optional[str]) -> Optional[Reference]:
        return self.people.get(person_id) if person_id else None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Everything a data source returns for one read: rows plus lookups."""

    rows: tuple[TransactionRow, ...] = ()
    lookups: LookupTables = field(default_factory=LookupTables)
