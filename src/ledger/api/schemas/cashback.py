"""Pydantic schemas for cashback endpoints."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from ledger.domain.models import CashbackMode, CashbackSource


class CashbackEventRequest(BaseModel):
    """One field edit or clear, in the order the user made it."""

    field: Literal["percent", "amount"]
    value: Optional[Union[str, float]] = Field(
        default=None,
        description="Entered text or number; empty or null clears the field",
    )


class CashbackReconcileRequest(BaseModel):
    """Replay a sequence of edits for one transaction amount and account."""

    transaction_amount: Union[str, float] = Field(..., description="Transaction amount")
    account_id: Optional[str] = Field(default=None, description="Paying account")
    events: list[CashbackEventRequest] = Field(default_factory=list)
    prefill: bool = Field(
        default=False,
        description="Start from the maximum cashback for the account before replaying events",
    )


class CashbackStateResponse(BaseModel):
    """Reconciled cashback after the last event."""

    percent: float
    amount: int
    source: Optional[CashbackSource] = None
    mode: CashbackMode
    percent_input: str
    amount_input: str
    percent_exceeded: bool
    amount_exceeded: bool
    amount_limit: int
    effective_percent_limit: float
    enabled: bool
    hint: str
