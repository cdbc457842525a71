"""Ledger service for listing and creating transactions."""

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional

from ledger.core.exceptions import DataSourceError, ValidationError
from ledger.core.timezone import parse_instant
from ledger.domain.models import (
    Account,
    CategoryRef,
    LedgerSnapshot,
    Reference,
    TransactionCreate,
    TransactionNature,
    TransactionRecord,
)
from ledger.repositories.memory import InMemoryDataSource, create_seeded_store
from ledger.repositories.protocols import TransactionDataSource
from ledger.services.cashback import (
    CashbackLimits,
    to_fraction,
    reconcile_by_amount,
    reconcile_by_percent,
)
from ledger.services.normalizer import RecordNormalizer, normalize_row, parse_number
from ledger.services.query_engine import LedgerQuery, query_transactions

logger = logging.getLogger(__name__)


@dataclass
class ListResult:
    """A page of records; ``error`` is advisory and never hides the data."""

    data: list[TransactionRecord] = field(default_factory=list)
    total: int = 0
    error: Optional[str] = None


@dataclass
class CreateResult:
    """Exactly one of ``data`` and ``error`` is set."""

    data: Optional[TransactionRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SupportData:
    """Picker options for the transaction form."""

    accounts: list[Account] = field(default_factory=list)
    categories: list[CategoryRef] = field(default_factory=list)
    shops: list[Reference] = field(default_factory=list)
    people: list[Reference] = field(default_factory=list)
    error: Optional[str] = None


class LedgerService:
    """
    Service for reading and writing the transaction ledger.

    Reads go to ``source``; when it fails the service serves the fallback
    store's last-known collection and reports an advisory message instead
    of raising. Writes go to ``source`` only, and a failed write leaves the
    fallback untouched.
    """

    def __init__(
        self,
        source: TransactionDataSource,
        fallback: Optional[InMemoryDataSource] = None,
        source_warning: Optional[str] = None,
    ):
        self._source = source
        if fallback is None:
            fallback = source if isinstance(source, InMemoryDataSource) else create_seeded_store()
        self._fallback = fallback
        self._source_warning = source_warning

    @property
    def source(self) -> TransactionDataSource:
        return self._source

    @property
    def fallback(self) -> InMemoryDataSource:
        return self._fallback

    @property
    def is_degraded(self) -> bool:
        """True when the primary source is the fallback store itself."""
        return self._source is self._fallback

    def list_transactions(self, query: Optional[LedgerQuery] = None) -> ListResult:
        """Return one page of canonical records matching ``query``."""
        query = query or LedgerQuery()
        snapshot, warning = self._load_snapshot()
        records = RecordNormalizer(snapshot.lookups).normalize_all(snapshot.rows)
        result = query_transactions(records, query)
        return ListResult(data=result.data, total=result.total, error=warning)

    def fetch_support_data(self) -> SupportData:
        """Return accounts, categories, shops and people for form pickers."""
        snapshot, warning = self._load_snapshot()
        lookups = snapshot.lookups
        return SupportData(
            accounts=list(lookups.accounts.values()),
            categories=sorted(lookups.categories.values(), key=lambda c: c.name),
            shops=sorted(lookups.shops.values(), key=lambda s: s.name),
            people=sorted(lookups.people.values(), key=lambda p: p.name),
            error=warning,
        )

    def create_transaction(self, payload: TransactionCreate) -> CreateResult:
        """
        Validate and persist a new transaction.

        Assigns a fresh id, defaults ``status`` to "Active" and
        ``final_price`` to the amount. Cashback is reconciled against the
        paying account's caps before it is stored.
        """
        snapshot, _ = self._load_snapshot()
        try:
            payload = self._validate_create(payload, snapshot)
        except ValidationError as exc:
            return CreateResult(error=exc.message)

        row = payload.to_row(txn_id=str(uuid.uuid4()))
        try:
            stored = self._source.insert(row)
        except DataSourceError as exc:
            logger.warning("Insert into %s store failed: %s", self._source.name, exc.message)
            return CreateResult(error=exc.message)

        logger.info("Created transaction %s (%s, %s)", stored.id, payload.nature.value, payload.amount)
        return CreateResult(data=normalize_row(stored, snapshot.lookups))

    def _load_snapshot(self) -> tuple[LedgerSnapshot, Optional[str]]:
        try:
            snapshot = self._source.fetch_snapshot()
        except DataSourceError as exc:
            logger.warning("Reading from %s store failed: %s", self._source.name, exc.message)
            warning = f"Could not load transactions ({exc.message}); showing last known data."
            return self._fallback.fetch_snapshot(), warning

        if not self.is_degraded:
            self._fallback.replace_all(snapshot.rows, snapshot.lookups)
        return snapshot, self._source_warning

    def _validate_create(self, data: TransactionCreate, snapshot: LedgerSnapshot) -> TransactionCreate:
        """Validate creation input; returns the payload with cashback reconciled."""
        amount = parse_number(data.amount)
        if amount is None or amount <= 0:
            raise ValidationError("Invalid amount.")
        if parse_instant(data.date) is None:
            raise ValidationError("Invalid transaction date.")

        if data.nature == TransactionNature.EX and not data.from_account_id:
            raise ValidationError("Expense requires a source account.")
        if data.nature == TransactionNature.IN and not data.to_account_id:
            raise ValidationError("Income requires a destination account.")
        if data.nature == TransactionNature.TF:
            if not data.from_account_id or not data.to_account_id:
                raise ValidationError("Transfer requires both source and destination accounts.")
            if data.from_account_id == data.to_account_id:
                raise ValidationError("Transfer accounts must differ.")
        if data.nature == TransactionNature.DEBT and not (data.from_account_id or data.to_account_id):
            raise ValidationError("Debt requires an account.")

        if data.final_price is not None and parse_number(data.final_price) is None:
            raise ValidationError("Invalid final price.")

        return self._reconcile_cashback(data, amount, snapshot)

    @staticmethod
    def _reconcile_cashback(data: TransactionCreate, amount, snapshot: LedgerSnapshot) -> TransactionCreate:
        if data.cashback_percent is None and data.cashback_amount is None:
            return data

        percent = parse_number(data.cashback_percent) if data.cashback_percent is not None else None
        cash = parse_number(data.cashback_amount) if data.cashback_amount is not None else None
        if data.cashback_percent is not None and (percent is None or not 0 <= percent <= 100):
            raise ValidationError("Cashback percentage must be between 0 and 100.")
        if data.cashback_amount is not None and (cash is None or cash < 0):
            raise ValidationError("Cashback amount must be greater than or equal to 0.")
        if cash is not None and cash > amount:
            raise ValidationError("Cashback cannot exceed the transaction amount.")

        account = snapshot.lookups.account(data.from_account_id)
        if account is None:
            return data
        if not account.is_cashback_eligible:
            logger.info("Account %s has no cashback; storing zero cashback", account.id)
            return replace(data, cashback_percent=0, cashback_amount=0)

        limits = CashbackLimits.compute(amount, account)
        if cash is not None:
            candidate = to_fraction(cash)
            if percent is not None:
                candidate = min(candidate, limits.amount_for_percent(to_fraction(percent)))
            state = reconcile_by_amount(candidate, limits)
        else:
            state = reconcile_by_percent(to_fraction(percent), limits)

        return replace(
            data,
            cashback_percent=round(float(state.percent), 2),
            cashback_amount=state.amount,
        )
