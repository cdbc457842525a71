"""Date and time helpers for ledger timestamps."""

from datetime import date, datetime, time
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser

from ledger.config.settings import get_settings


def local_tz() -> pytz.BaseTzInfo:
    """Return the configured ledger timezone."""
    return pytz.timezone(get_settings().timezone)


def now_local() -> datetime:
    """Return current time in the ledger timezone."""
    return datetime.now(local_tz())


def localize(dt: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """Attach the ledger timezone to a naive datetime; convert an aware one."""
    tz = tz or local_tz()
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def parse_instant(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 (or similar) timestamp into an aware datetime.

    Naive values are assumed to be in the ledger timezone. Returns None
    when the value is empty or cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return localize(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        dt = date_parser.isoparse(text)
    except ValueError:
        try:
            dt = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None
    return localize(dt)


def start_of_day(day: date) -> datetime:
    """Return 00:00:00 of the given day in the ledger timezone."""
    return local_tz().localize(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    """Return 23:59:59.999999 of the given day in the ledger timezone."""
    return local_tz().localize(datetime.combine(day, time.max))
