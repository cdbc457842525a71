"""Pydantic schemas for transaction endpoints."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ledger.domain.models import TransactionNature, TransactionRecord
from ledger.services.normalizer import normalize_nature


class ReferenceResponse(BaseModel):
    """Resolved foreign key."""

    model_config = {"from_attributes": True}

    id: str
    name: str


class CategoryResponse(ReferenceResponse):
    """Category with the nature it implies."""

    nature: TransactionNature


class AccountResponse(ReferenceResponse):
    """Account option including its cashback settings."""

    type: Optional[str] = None
    is_cashback_eligible: bool = False
    cashback_percentage: Optional[float] = None
    max_cashback_amount: Optional[float] = None


class TransactionCreateRequest(BaseModel):
    """Request schema for creating a transaction."""

    amount: float = Field(..., gt=0, description="Amount in whole currency units")
    date: str = Field(..., min_length=1, description="ISO-8601 timestamp")
    nature: TransactionNature = Field(..., description="IN, EX, TF or DEBT")
    notes: Optional[str] = Field(default=None, max_length=1000)
    final_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[str] = Field(default=None, max_length=40)
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    shop_id: Optional[str] = None
    person_id: Optional[str] = None
    cashback_percent: Optional[float] = Field(default=None, ge=0, le=100)
    cashback_amount: Optional[float] = Field(default=None, ge=0)
    debt_tag: Optional[str] = Field(default=None, max_length=100)
    debt_cycle_tag: Optional[str] = Field(default=None, max_length=100)

    @field_validator("nature", mode="before")
    @classmethod
    def accept_legacy_nature(cls, v):
        return normalize_nature(v) or v


class TransactionResponse(BaseModel):
    """Response schema for a single canonical transaction."""

    model_config = {"from_attributes": True}

    id: str
    date: str
    amount: int
    final_price: Optional[float] = None
    notes: Optional[str] = None
    status: str
    nature: TransactionNature
    from_account: Optional[ReferenceResponse] = None
    to_account: Optional[ReferenceResponse] = None
    category: Optional[CategoryResponse] = None
    shop: Optional[ReferenceResponse] = None
    person: Optional[ReferenceResponse] = None
    cashback_percent: Optional[float] = None
    cashback_amount: Optional[float] = None
    debt_tag: Optional[str] = None
    debt_cycle_tag: Optional[str] = None
    amount_in_words: str = ""

    @classmethod
    def from_record(cls, record: TransactionRecord, amount_in_words: str = "") -> "TransactionResponse":
        response = cls.model_validate(record)
        response.amount_in_words = amount_in_words
        return response


class TransactionListResponse(BaseModel):
    """Response schema for listing transactions."""

    data: list[TransactionResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    error: Optional[str] = None


class SupportDataResponse(BaseModel):
    """Picker options for the transaction form."""

    accounts: list[AccountResponse]
    categories: list[CategoryResponse]
    shops: list[ReferenceResponse]
    people: list[ReferenceResponse]
    error: Optional[str] = None
