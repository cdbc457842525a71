from fastapi import APIRouter, Depends

from ledger.api.deps import get_ledger_service
from ledger.api.schemas.cashback import CashbackReconcileRequest, CashbackStateResponse
from ledger.core.exceptions import NotFoundError
from ledger.services import CashbackReconciler, LedgerService

router = APIRouter(prefix="/cashback", tags=["cashback"])


@router.post("/reconcile", response_model=CashbackStateResponse)
def reconcile_cashback(
    data: CashbackReconcileRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Replay cashback edits for one transaction amount and paying account.

    Each event either edits a field (``value`` set) or clears it
    (``value`` empty or null). The response is the state after the last
    event, together with the caps that applied. With ``prefill`` the
    replay starts from the maximum cashback, as when an account is picked.
    """
    account = None
    if data.account_id:
        support = service.fetch_support_data()
        account = next((a for a in support.accounts if a.id == data.account_id), None)
        if account is None:
            raise NotFoundError("Account", data.account_id)

    reconciler = CashbackReconciler(data.transaction_amount, account, prefill_on_context=data.prefill)
    if data.prefill:
        reconciler.set_context(data.transaction_amount, account)
    for event in data.events:
        cleared = event.value is None or (isinstance(event.value, str) and not event.value.strip())
        if event.field == "percent":
            if cleared:
                reconciler.clear_percent()
            else:
                reconciler.edit_percent(event.value)
        elif cleared:
            reconciler.clear_amount()
        else:
            reconciler.edit_amount(event.value)

    state = reconciler.state
    limits = reconciler.limits
    return CashbackStateResponse(
        percent=float(state.percent),
        amount=state.amount,
        source=state.source,
        mode=state.mode,
        percent_input=state.percent_input,
        amount_input=state.amount_input,
        percent_exceeded=state.percent_exceeded,
        amount_exceeded=state.amount_exceeded,
        amount_limit=limits.amount_limit,
        effective_percent_limit=float(limits.effective_percent_limit),
        enabled=limits.enabled,
        hint=reconciler.hint(),
    )
