"""Mapping of raw transaction rows into canonical records."""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from ledger.domain.models import (
    TransactionNature,
    LEGACY_NATURE_ALIASES,
    TransactionRow,
    TransactionRecord,
    LookupTables,
)

Numeric = Union[int, float]


def parse_number(value: Any) -> Optional[Numeric]:
    """
    Coerce a numeric-like value (number or text) into a finite number.

    Returns None for missing, blank, non-finite or unparsable input.
    Integral values come back as ``int``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        parsed: float = float(value)
    elif isinstance(value, float):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None

    if not math.isfinite(parsed):
        return None
    return int(parsed) if parsed.is_integer() else parsed


def normalize_nature(value: Any) -> Optional[TransactionNature]:
    """Resolve a nature code case-insensitively; unknown values give None."""
    if value is None:
        return None
    if isinstance(value, TransactionNature):
        return value
    code = str(value).strip().upper()
    if not code:
        return None
    if code in LEGACY_NATURE_ALIASES:
        return LEGACY_NATURE_ALIASES[code]
    try:
        return TransactionNature(code)
    except ValueError:
        return None


class RecordNormalizer:
    """
    Maps raw rows plus lookup tables into ``TransactionRecord`` objects.

    A single malformed field never invalidates a row: bad numbers become
    None (or 0 for the amount) and dangling foreign keys resolve to None.
    """

    def __init__(self, lookups: LookupTables):
        self._lookups = lookups

    def normalize(self, row: TransactionRow) -> TransactionRecord:
        return normalize_row(row, self._lookups)

    def normalize_all(self, rows) -> list[TransactionRecord]:
        return [normalize_row(row, self._lookups) for row in rows]


def normalize_row(row: TransactionRow, lookups: LookupTables) -> TransactionRecord:
    """Build the canonical record for one row."""
    amount = parse_number(row.amount)
    category = lookups.category(row.category_id)

    nature = (
        normalize_nature(row.nature)
        or (category.nature if category else None)
        or TransactionNature.EX
    )

    from_account = lookups.account(row.from_account_id)
    to_account = lookups.account(row.to_account_id)

    return TransactionRecord(
        id=str(row.id),
        date=str(row.date) if row.date is not None else "",
        amount=max(0, math.floor(amount)) if amount is not None else 0,
        final_price=parse_number(row.final_price),
        notes=row.notes,
        status=row.status or "Active",
        nature=nature,
        from_account=from_account.as_reference() if from_account else None,
        to_account=to_account.as_reference() if to_account else None,
        category=category,
        shop=lookups.shop(row.shop_id),
        person=lookups.person(row.person_id),
        cashback_percent=parse_number(row.cashback_percent),
        cashback_amount=parse_number(row.cashback_amount),
        debt_tag=row.debt_tag,
        debt_cycle_tag=row.debt_cycle_tag,
    )
