import math
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ledger.api.deps import get_app_settings, get_ledger_service
from ledger.api.schemas.transaction import (
    AccountResponse,
    CategoryResponse,
    ReferenceResponse,
    SupportDataResponse,
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionResponse,
)
from ledger.config.settings import Settings
from ledger.core.numerals import render_number_words
from ledger.domain.models import NATURE_FILTER_ALL, TransactionCreate, TransactionRecord
from ledger.services import LedgerQuery, LedgerService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _to_response(record: TransactionRecord) -> TransactionResponse:
    return TransactionResponse.from_record(record, render_number_words(record.amount))


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    nature: str = Query(NATURE_FILTER_ALL, description="ALL, IN, EX, TF or DEBT (legacy DE accepted)"),
    search: str = Query(""),
    account_id: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    service: LedgerService = Depends(get_ledger_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    List transactions, newest first.

    ``error`` carries an advisory message when the remote store is
    unavailable; the data is then the last known collection.
    """
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    query = LedgerQuery(
        nature=nature,
        search=search,
        account_id=account_id,
        category_id=category_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=size,
    )
    result = service.list_transactions(query)
    return TransactionListResponse(
        data=[_to_response(r) for r in result.data],
        total=result.total,
        page=page,
        page_size=size,
        total_pages=max(1, math.ceil(result.total / size)),
        error=result.error,
    )


@router.get("/support", response_model=SupportDataResponse)
def get_support_data(service: LedgerService = Depends(get_ledger_service)):
    """Accounts, categories, shops and people for the transaction form."""
    support = service.fetch_support_data()
    return SupportDataResponse(
        accounts=[AccountResponse.model_validate(a) for a in support.accounts],
        categories=[CategoryResponse.model_validate(c) for c in support.categories],
        shops=[ReferenceResponse.model_validate(s) for s in support.shops],
        people=[ReferenceResponse.model_validate(p) for p in support.people],
        error=support.error,
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """Create a new transaction."""
    result = service.create_transaction(TransactionCreate(**data.model_dump()))
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return _to_response(result.data)
