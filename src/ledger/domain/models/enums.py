"""Enumerations for domain models."""

from enum import Enum


class TransactionNature(str, Enum):
    """Four-way classification of a ledger transaction."""

    IN = "IN"  # income
    EX = "EX"  # expense
    TF = "TF"  # transfer
    DEBT = "DEBT"


NATURE_FILTER_ALL = "ALL"

# Legacy two-letter code still present in older rows
LEGACY_NATURE_ALIASES = {"DE": TransactionNature.DEBT}


class CashbackSource(str, Enum):
    """Which cashback field currently drives the percent/amount relationship."""

    PERCENT = "percent"
    AMOUNT = "amount"


class CashbackMode(str, Enum):
    """Reconciler states."""

    IDLE = "IDLE"
    DRIVEN_BY_PERCENT = "DRIVEN_BY_PERCENT"
    DRIVEN_BY_AMOUNT = "DRIVEN_BY_AMOUNT"
