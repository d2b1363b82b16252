"""Mini README: Finance records and local filtering for the transaction view.

This package mirrors the records served by the transaction backend and
provides the pure filter engine used to narrow the transaction table. It
performs no I/O; fetching and mutating live in ``ledgerview.api`` and
``ledgerview.state``.
"""

from .filters import FilterState, FilterType, apply_filter_state, calendar_day, filter_transactions
from .models import (
    Summary,
    Transaction,
    TransactionDraft,
    TransactionType,
    parse_balance,
    parse_timestamp,
)

__all__ = [
    "FilterState",
    "FilterType",
    "Summary",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "apply_filter_state",
    "calendar_day",
    "filter_transactions",
    "parse_balance",
    "parse_timestamp",
]
