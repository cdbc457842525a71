"""SQLAlchemy implementation of TransactionDataSource."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger.core.exceptions import DataSourceError
from ledger.domain.models import (
    Account,
    CategoryRef,
    LedgerSnapshot,
    LookupTables,
    Reference,
    TransactionNature,
    TransactionRow,
)
from ledger.repositories.sqlalchemy.orm_models import (
    AccountORM,
    CategoryORM,
    PersonORM,
    ShopORM,
    TransactionORM,
)
from ledger.services.normalizer import normalize_nature, parse_number

logger = logging.getLogger(__name__)

ROW_COLUMNS = (
    "id",
    "date",
    "amount",
    "final_price",
    "notes",
    "status",
    "nature",
    "from_account_id",
    "to_account_id",
    "person_id",
    "category_id",
    "shop_id",
    "cashback_percent",
    "cashback_amount",
    "debt_tag",
    "debt_cycle_tag",
)


class SqlAlchemyDataSource:
    """Relational store backed by a SQLAlchemy session."""

    name = "database"

    def __init__(self, db: Session):
        self._db = db

    def fetch_snapshot(self) -> LedgerSnapshot:
        """Load every transaction (newest first) and the four lookup tables."""
        try:
            lookups = LookupTables.from_lists(
                accounts=[self._account_to_domain(a) for a in self._db.query(AccountORM).all()],
                categories=[
                    self._category_to_domain(c)
                    for c in self._db.query(CategoryORM).order_by(CategoryORM.name).all()
                ],
                shops=[
                    Reference(id=s.id, name=s.name or "")
                    for s in self._db.query(ShopORM).order_by(ShopORM.name).all()
                ],
                people=[
                    Reference(id=p.id, name=p.name or "")
                    for p in self._db.query(PersonORM).order_by(PersonORM.name).all()
                ],
            )
            rows = tuple(
                self._to_row(t)
                for t in self._db.query(TransactionORM).order_by(TransactionORM.date.desc()).all()
            )
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise DataSourceError(self._describe(exc)) from exc
        return LedgerSnapshot(rows=rows, lookups=lookups)

    def insert(self, row: TransactionRow) -> TransactionRow:
        """Persist a new transaction row."""
        orm_txn = TransactionORM(**{column: getattr(row, column) for column in ROW_COLUMNS})
        try:
            self._db.add(orm_txn)
            self._db.commit()
            self._db.refresh(orm_txn)
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise DataSourceError(self._describe(exc)) from exc
        return self._to_row(orm_txn)

    # Lookup writers, used to seed a fresh database

    def add_account(self, account: Account) -> Account:
        self._add(AccountORM(
            id=account.id,
            name=account.name,
            type=account.type,
            is_cashback_eligible=account.is_cashback_eligible,
            cashback_percentage=account.cashback_percentage,
            max_cashback_amount=account.max_cashback_amount,
        ))
        return account

    def add_category(self, category: CategoryRef) -> CategoryRef:
        self._add(CategoryORM(
            id=category.id,
            name=category.name,
            transaction_nature=category.nature.value,
        ))
        return category

    def add_shop(self, shop: Reference) -> Reference:
        self._add(ShopORM(id=shop.id, name=shop.name))
        return shop

    def add_person(self, person: Reference) -> Reference:
        self._add(PersonORM(id=person.id, name=person.name))
        return person

    def _add(self, orm_obj) -> None:
        try:
            self._db.add(orm_obj)
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise DataSourceError(self._describe(exc)) from exc

    @staticmethod
    def _describe(exc: SQLAlchemyError) -> str:
        orig = getattr(exc, "orig", None)
        return str(orig) if orig is not None else str(exc)

    @staticmethod
    def _to_row(orm: TransactionORM) -> TransactionRow:
        """Convert ORM model to a raw row."""
        return TransactionRow(**{column: getattr(orm, column) for column in ROW_COLUMNS})

    @staticmethod
    def _account_to_domain(orm: AccountORM) -> Account:
        return Account(
            id=orm.id,
            name=orm.name or "",
            type=orm.type,
            is_cashback_eligible=bool(orm.is_cashback_eligible),
            cashback_percentage=parse_number(orm.cashback_percentage),
            max_cashback_amount=parse_number(orm.max_cashback_amount),
        )

    @staticmethod
    def _category_to_domain(orm: CategoryORM) -> CategoryRef:
        return CategoryRef(
            id=orm.id,
            name=orm.name or "",
            nature=normalize_nature(orm.transaction_nature) or TransactionNature.EX,
        )
