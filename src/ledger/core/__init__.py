"""Core utilities and shared functionality."""

from ledger.core.timezone import (
    local_tz,
    now_local,
    localize,
    parse_instant,
    start_of_day,
    end_of_day,
)
from ledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    DataSourceError,
    ConfigurationError,
)
from ledger.core.numerals import render_number_words

__all__ = [
    "local_tz",
    "now_local",
    "localize",
    "parse_instant",
    "start_of_day",
    "end_of_day",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "DataSourceError",
    "ConfigurationError",
    "render_number_words",
]
