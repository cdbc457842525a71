"""Filtering, ordering and pagination of canonical transaction records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from dateutil import parser as date_parser

from ledger.core.exceptions import ValidationError
from ledger.core.numerals import render_number_words
from ledger.core.timezone import parse_instant, start_of_day, end_of_day
from ledger.domain.models import (
    NATURE_FILTER_ALL,
    TransactionNature,
    TransactionRecord,
)
from ledger.services.normalizer import normalize_nature

DateLike = Union[date, str, None]

DEFAULT_PAGE_SIZE = 10


def _coerce_day(value: DateLike, label: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value).strip()).date()
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value!r}")


@dataclass
class LedgerQuery:
    """
    Listing criteria. Every filter is optional and they combine with AND.

    ``date_from`` / ``date_to`` are calendar days, inclusive at both ends.
    ``page`` is 1-indexed.
    """

    nature: Union[TransactionNature, str] = NATURE_FILTER_ALL
    search: str = ""
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[str] = None
    date_from: DateLike = None
    date_to: DateLike = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        nature = self.nature or NATURE_FILTER_ALL
        if str(nature).strip().upper() == NATURE_FILTER_ALL:
            self.nature = NATURE_FILTER_ALL
        else:
            # Legacy codes such as "DE" resolve the same way they do on read
            self.nature = normalize_nature(nature)
            if self.nature is None:
                raise ValidationError(f"Invalid nature filter: {nature!r}")
        self.search = self.search or ""
        self.date_from = _coerce_day(self.date_from, "date_from")
        self.date_to = _coerce_day(self.date_to, "date_to")
        if self.page < 1:
            raise ValidationError("page must be >= 1")
        if self.page_size < 1:
            raise ValidationError("page_size must be >= 1")


@dataclass
class QueryResult:
    """One page of matching records plus the total match count."""

    data: list[TransactionRecord] = field(default_factory=list)
    total: int = 0


def search_haystacks(record: TransactionRecord) -> list[Optional[str]]:
    """Texts a free-text search term is matched against."""
    return [
        record.notes,
        record.category.name if record.category else None,
        record.shop.name if record.shop else None,
        record.from_account.name if record.from_account else None,
        record.to_account.name if record.to_account else None,
        record.person.name if record.person else None,
        render_number_words(record.amount or 0),
    ]


def build_predicate(query: LedgerQuery):
    """Return a callable deciding whether a record matches ``query``."""
    term = query.search.strip().lower()
    lower = start_of_day(query.date_from) if query.date_from else None
    upper = end_of_day(query.date_to) if query.date_to else None

    def matches(record: TransactionRecord) -> bool:
        if query.nature != NATURE_FILTER_ALL and record.nature != query.nature:
            return False
        if query.account_id:
            from_id = record.from_account.id if record.from_account else None
            to_id = record.to_account.id if record.to_account else None
            if query.account_id not in (from_id, to_id):
                return False
        if query.category_id and (record.category.id if record.category else None) != query.category_id:
            return False
        if query.status and record.status != query.status:
            return False
        if lower or upper:
            instant = parse_instant(record.date)
            # Unparsable dates are not excluded by a range
            if instant is not None:
                if lower and instant < lower:
                    return False
                if upper and instant > upper:
                    return False
        if term:
            return any(term in text.lower() for text in search_haystacks(record) if text)
        return True

    return matches


def sort_newest_first(records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    """Stable sort by date instant, most recent first; unparsable dates last."""
    keyed = []
    for record in records:
        instant = parse_instant(record.date)
        keyed.append((instant.timestamp() if instant else None, record))
    # sorted() is stable, reverse=True keeps ties in input order
    with_dates = sorted(
        (item for item in keyed if item[0] is not None),
        key=lambda item: item[0],
        reverse=True,
    )
    without_dates = [item for item in keyed if item[0] is None]
    return [record for _, record in with_dates + without_dates]


def paginate(records: Sequence[TransactionRecord], page: int, page_size: int) -> list[TransactionRecord]:
    start = (page - 1) * page_size
    return list(records[start:start + page_size])


def query_transactions(records: Iterable[TransactionRecord], query: LedgerQuery) -> QueryResult:
    """
    Filter, sort (newest first) and paginate ``records``.

    ``total`` counts every match before pagination, so a page past the
    end returns no data but still the full count.
    """
    matches = build_predicate(query)
    ordered = sort_newest_first(record for record in records if matches(record))
    return QueryResult(
        data=paginate(ordered, query.page, query.page_size),
        total=len(ordered),
    )
