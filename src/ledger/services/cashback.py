"""
Cashback reconciliation between a percentage and an absolute amount.

The two fields are linked: whichever was edited last is the source of
truth and the other is derived from it, subject to the account's caps.
The logic is an explicit state machine (``transition``) so each edit can
be replayed and checked in isolation; ``CashbackReconciler`` wraps it for
one editing session.

Arithmetic runs on ``Fraction`` so that deriving an amount from its own
percent gives back the same amount.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Callable, Optional, Union

from ledger.core.numerals import render_number_words
from ledger.domain.models import Account, CashbackMode, CashbackSource

logger = logging.getLogger(__name__)

RawInput = Union[str, int, float, Decimal, None]

ZERO = Fraction(0)
HUNDRED = Fraction(100)

# Entries beyond 10**MAX_EXPONENT saturate and below 10**-MAX_EXPONENT read as zero;
# both are far outside any cap.
MAX_EXPONENT = 30


# =============================================================================
# INPUT PARSING / FORMATTING
# =============================================================================


def to_fraction(value) -> Optional[Fraction]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    text = repr(value) if isinstance(value, float) else str(value).strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    if number and number.adjusted() > MAX_EXPONENT:
        return Fraction(10 ** (MAX_EXPONENT + 1)) * (-1 if number < 0 else 1)
    if number and number.adjusted() < -MAX_EXPONENT:
        return ZERO
    return Fraction(number)


def parse_amount_input(value: RawInput) -> Optional[int]:
    """
    Parse an amount entry in whole currency units.

    Text keeps digits only, so ``"1.250.000đ"`` reads as 1250000. Returns
    None for an empty entry.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        digits = re.sub(r"[^0-9]", "", value)
        return int(digits) if digits else 0
    number = to_fraction(value)
    if number is None:
        return 0
    return max(0, math.floor(number))


def parse_percent_input(value: RawInput) -> Optional[Fraction]:
    """Parse a percent entry; empty gives None, garbage gives 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    number = to_fraction(value)
    return number if number is not None else ZERO


def format_amount(value: int) -> str:
    """Format whole currency units with ``.`` thousands separators."""
    if not value:
        return "0"
    return f"{value:,}".replace(",", ".")


def format_percent(value) -> str:
    """Format a percent with at most two decimals and no trailing zeros."""
    if not value:
        return "0"
    text = f"{float(value):.2f}"
    return text.rstrip("0").rstrip(".")


def _clamp(value: Fraction, low: Fraction, high: Fraction) -> Fraction:
    return min(max(value, low), high)


# =============================================================================
# LIMITS
# =============================================================================


@dataclass(frozen=True)
class CashbackLimits:
    """
    Caps derived from one (transaction amount, account) pairing.

    ``percent_cap`` is in percent units (5 for 5%) or None when the account
    declares no percentage; in that case only ``max_cashback_amount`` and
    the transaction amount bound the cashback.
    """

    transaction_amount: int = 0
    enabled: bool = False
    percent_cap: Optional[Fraction] = None
    max_amount: Optional[int] = None
    amount_limit: int = 0
    effective_percent_limit: Fraction = ZERO

    @classmethod
    def compute(cls, transaction_amount: RawInput, account: Optional[Account]) -> "CashbackLimits":
        amount = parse_amount_input(transaction_amount) or 0
        if account is None:
            return cls(transaction_amount=amount)

        fraction = to_fraction(account.cashback_percentage)
        percent_cap = max(ZERO, fraction * HUNDRED) if fraction is not None else None
        cap = to_fraction(account.max_cashback_amount)
        max_amount = max(0, math.floor(cap)) if cap is not None else None

        enabled = bool(account.is_cashback_eligible) and amount > 0
        if amount <= 0:
            return cls(
                transaction_amount=amount,
                enabled=False,
                percent_cap=percent_cap,
                max_amount=max_amount,
            )

        limit_from_percent = math.floor(percent_cap * amount / HUNDRED) if percent_cap is not None else amount
        limit_from_max = max_amount if max_amount is not None else amount
        amount_limit = max(0, min(limit_from_percent, limit_from_max, amount))

        if amount_limit <= 0:
            effective = ZERO
        else:
            derived = Fraction(amount_limit) * HUNDRED / amount
            ceiling = min(percent_cap, HUNDRED) if percent_cap is not None else HUNDRED
            effective = _clamp(derived, ZERO, ceiling)

        return cls(
            transaction_amount=amount,
            enabled=enabled,
            percent_cap=percent_cap,
            max_amount=max_amount,
            amount_limit=amount_limit,
            effective_percent_limit=effective,
        )

    def amount_for_percent(self, percent: Fraction) -> int:
        """Whole-unit amount for a percent of the transaction, floored."""
        if self.transaction_amount <= 0:
            return 0
        return math.floor(percent * self.transaction_amount / HUNDRED)

    def percent_for_amount(self, amount: int) -> Fraction:
        if self.transaction_amount <= 0:
            return ZERO
        return Fraction(amount) * HUNDRED / self.transaction_amount


# =============================================================================
# STATE MACHINE
# =============================================================================


@dataclass(frozen=True)
class CashbackChange:
    """Emitted after every recomputation."""

    percent: float
    amount: int
    source: Optional[CashbackSource]


@dataclass(frozen=True)
class CashbackState:
    """Reconciler state; ``raw`` is the source-of-truth value as entered."""

    mode: CashbackMode = CashbackMode.IDLE
    percent: Fraction = ZERO
    amount: int = 0
    raw: Optional[Fraction] = None
    percent_exceeded: bool = False
    amount_exceeded: bool = False

    @property
    def source(self) -> Optional[CashbackSource]:
        if self.mode == CashbackMode.DRIVEN_BY_PERCENT:
            return CashbackSource.PERCENT
        if self.mode == CashbackMode.DRIVEN_BY_AMOUNT:
            return CashbackSource.AMOUNT
        return None

    @property
    def percent_input(self) -> str:
        return "" if self.mode == CashbackMode.IDLE else format_percent(self.percent)

    @property
    def amount_input(self) -> str:
        return "" if self.mode == CashbackMode.IDLE else format_amount(self.amount)

    def as_change(self) -> CashbackChange:
        return CashbackChange(
            percent=float(self.percent),
            amount=self.amount,
            source=self.source,
        )


@dataclass(frozen=True)
class EditPercent:
    value: RawInput


@dataclass(frozen=True)
class EditAmount:
    value: RawInput


@dataclass(frozen=True)
class ClearPercent:
    pass


@dataclass(frozen=True)
class ClearAmount:
    pass


@dataclass(frozen=True)
class ContextChanged:
    limits: CashbackLimits = field(default_factory=CashbackLimits)
    # Reset the editor to the full amount limit
    prefill: bool = False


CashbackEvent = Union[EditPercent, EditAmount, ClearPercent, ClearAmount, ContextChanged]

IDLE_STATE = CashbackState()


def reconcile_by_percent(raw_percent: Fraction, limits: CashbackLimits) -> CashbackState:
    """Percent is the source of truth; the amount is derived from it."""
    percent = _clamp(raw_percent, ZERO, limits.effective_percent_limit)
    amount = max(0, min(limits.amount_for_percent(percent), limits.amount_limit))
    return CashbackState(
        mode=CashbackMode.DRIVEN_BY_PERCENT,
        percent=limits.percent_for_amount(amount),
        amount=amount,
        raw=raw_percent,
        percent_exceeded=raw_percent > limits.effective_percent_limit,
    )


def reconcile_by_amount(raw_amount: Fraction, limits: CashbackLimits) -> CashbackState:
    """
    Amount is the source of truth.

    The clamped amount is turned into a percent, the percent is clamped,
    and a second amount is derived from it; the smaller candidate wins so
    a binding percent cap cannot let the amount creep up.
    """
    clamped_amount = max(0, min(math.floor(raw_amount), limits.amount_limit))
    percent = _clamp(limits.percent_for_amount(clamped_amount), ZERO, limits.effective_percent_limit)
    amount_from_percent = limits.amount_for_percent(percent)
    amount = max(0, min(clamped_amount, amount_from_percent, limits.amount_limit))
    return CashbackState(
        mode=CashbackMode.DRIVEN_BY_AMOUNT,
        percent=limits.percent_for_amount(amount),
        amount=amount,
        raw=raw_amount,
        amount_exceeded=raw_amount > limits.amount_limit,
    )


def _reapply(state: CashbackState, limits: CashbackLimits) -> CashbackState:
    if state.mode == CashbackMode.DRIVEN_BY_PERCENT and state.raw is not None:
        return reconcile_by_percent(state.raw, limits)
    if state.mode == CashbackMode.DRIVEN_BY_AMOUNT and state.raw is not None:
        return reconcile_by_amount(state.raw, limits)
    return IDLE_STATE


def transition(state: CashbackState, event: CashbackEvent, limits: CashbackLimits) -> CashbackState:
    """
    Apply one event and return the next state.

    ``limits`` are the caps in force; a ``ContextChanged`` event carries
    its own and, with ``prefill``, resets the editor to the amount
    limit. When cashback is disabled every event yields zeros.
    """
    if isinstance(event, ContextChanged):
        limits = event.limits
        if not limits.enabled:
            return IDLE_STATE
        if event.prefill:
            return reconcile_by_amount(Fraction(limits.amount_limit), limits)
        return _reapply(state, limits)

    if not limits.enabled:
        return IDLE_STATE

    if isinstance(event, EditPercent):
        raw = parse_percent_input(event.value)
        if raw is None:
            return transition(state, ClearPercent(), limits)
        return reconcile_by_percent(raw, limits)

    if isinstance(event, EditAmount):
        raw_amount = parse_amount_input(event.value)
        if raw_amount is None:
            return transition(state, ClearAmount(), limits)
        return reconcile_by_amount(Fraction(raw_amount), limits)

    if isinstance(event, ClearPercent):
        # Fall back to the amount field when it still holds a value
        if state.mode != CashbackMode.IDLE and state.amount > 0:
            return reconcile_by_amount(Fraction(state.amount), limits)
        return IDLE_STATE

    if isinstance(event, ClearAmount):
        if state.mode != CashbackMode.IDLE and state.percent > 0:
            return reconcile_by_percent(state.percent, limits)
        return IDLE_STATE

    raise TypeError(f"Unsupported cashback event: {event!r}")


# =============================================================================
# SESSION WRAPPER
# =============================================================================


class CashbackReconciler:
    """
    Cashback editor for one (transaction amount, account) pairing.

    Every recomputation is reported through ``on_change`` as a
    ``CashbackChange``. With ``prefill_on_context`` every context change
    resets the editor to the maximum cashback.
    """

    def __init__(
        self,
        transaction_amount: RawInput = 0,
        account: Optional[Account] = None,
        on_change: Optional[Callable[[CashbackChange], None]] = None,
        prefill_on_context: bool = False,
    ):
        self._account = account
        self._prefill_on_context = prefill_on_context
        self._limits = CashbackLimits.compute(transaction_amount, account)
        self._state = IDLE_STATE
        self._on_change = on_change

    @property
    def state(self) -> CashbackState:
        return self._state

    @property
    def limits(self) -> CashbackLimits:
        return self._limits

    @property
    def account(self) -> Optional[Account]:
        return self._account

    @property
    def is_enabled(self) -> bool:
        return self._limits.enabled

    def dispatch(self, event: CashbackEvent) -> CashbackChange:
        """Run one event through the state machine and emit the result."""
        if isinstance(event, ContextChanged):
            self._limits = event.limits
        self._state = transition(self._state, event, self._limits)
        change = self._state.as_change()
        logger.debug("Cashback %s -> %s", type(event).__name__, change)
        if self._on_change is not None:
            self._on_change(change)
        return change

    def edit_percent(self, value: RawInput) -> CashbackChange:
        return self.dispatch(EditPercent(value))

    def edit_amount(self, value: RawInput) -> CashbackChange:
        return self.dispatch(EditAmount(value))

    def clear_percent(self) -> CashbackChange:
        return self.dispatch(ClearPercent())

    def clear_amount(self) -> CashbackChange:
        return self.dispatch(ClearAmount())

    def set_context(self, transaction_amount: RawInput, account: Optional[Account]) -> CashbackChange:
        """Re-derive the caps for a new amount or account and re-apply the current input."""
        self._account = account
        limits = CashbackLimits.compute(transaction_amount, account)
        return self.dispatch(ContextChanged(limits, prefill=self._prefill_on_context))

    def hint(self) -> str:
        return cashback_hint(self._limits, self._account)


def cashback_hint(limits: CashbackLimits, account: Optional[Account]) -> str:
    """Advisory text describing the caps that apply to this transaction."""
    if account is None:
        return "Chọn tài khoản để tính cashback."
    if not account.is_cashback_eligible:
        return f"Thẻ {account.name} không hỗ trợ cashback."
    if limits.transaction_amount <= 0:
        return "Nhập số tiền giao dịch để tính cashback."

    parts = []
    if limits.percent_cap is not None:
        parts.append(f"Tỷ lệ tối đa {format_percent(limits.percent_cap)}%")
    if limits.max_amount is not None:
        parts.append(f"Hoàn tiền tối đa {format_amount(limits.max_amount)}đ")
    prefix = (
        f"Giới hạn thẻ: {' • '.join(parts)}."
        if parts
        else "Không có giới hạn cashback được khai báo."
    )

    detail = (
        f"Giao dịch {format_amount(limits.transaction_amount)}đ ⇒ nhận tối đa "
        f"{format_amount(limits.amount_limit)}đ "
        f"(~{format_percent(limits.percent_for_amount(limits.amount_limit))}%)."
    )
    words = render_number_words(limits.amount_limit)
    return f"{prefix} {detail} ({words} đồng)"
