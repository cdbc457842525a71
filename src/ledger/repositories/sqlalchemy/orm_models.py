"""SQLAlchemy ORM model definitions."""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Numeric,
    String,
    Text,
)

from ledger.repositories.sqlalchemy.database import Base


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=True)
    is_cashback_eligible = Column(Boolean, default=False, nullable=False)
    cashback_percentage = Column(Numeric(precision=9, scale=6), nullable=True)
    max_cashback_amount = Column(Numeric(precision=18, scale=2), nullable=True)


class CategoryORM(Base):
    """SQLAlchemy model for Category."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    transaction_nature = Column(String(8), nullable=True)


class ShopORM(Base):
    """SQLAlchemy model for Shop."""

    __tablename__ = "shops"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)


class PersonORM(Base):
    """SQLAlchemy model for Person."""

    __tablename__ = "people"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)


class TransactionORM(Base):
    """SQLAlchemy model for a transaction row (foreign keys are nullable)."""

    __tablename__ = "transactions"

    id = Column(String(64), primary_key=True)
    date = Column(String(40), nullable=False, index=True)
    amount = Column(Numeric(precision=18, scale=2), nullable=False)
    final_price = Column(Numeric(precision=18, scale=2), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(40), nullable=True)
    nature = Column(String(8), nullable=True)
    from_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    to_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    person_id = Column(String(36), ForeignKey("people.id"), nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    shop_id = Column(String(36), ForeignKey("shops.id"), nullable=True)
    cashback_percent = Column(Numeric(precision=9, scale=4), nullable=True)
    cashback_amount = Column(Numeric(precision=18, scale=2), nullable=True)
    debt_tag = Column(String(100), nullable=True)
    debt_cycle_tag = Column(String(100), nullable=True)
