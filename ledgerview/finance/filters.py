"""Mini README: Local filter engine for the transaction table.

Structure:
    * FilterType - ``all`` plus the concrete transaction types.
    * FilterState - the ephemeral type/date selection of one view.
    * calendar_day - the display-zone calendar day of a timestamp.
    * filter_transactions - pure derivation of the displayed rows.

Filtering only narrows the locally held copy of the backend list. It never
issues requests and never mutates its input, so it can be re-run on every
change without memoisation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Iterable, List, Optional

from .models import Transaction, TransactionType


class FilterType(str, Enum):
    """Type filter choices offered by the filter controls."""

    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "FilterType":
        if value is None or not value.strip():
            return cls.ALL
        try:
            return cls(value.strip().lower())
        except ValueError as error:
            raise ValueError(f"Unsupported filter type: {value}") from error

    def matches(self, transaction_type: TransactionType) -> bool:
        return self is FilterType.ALL or self.value == transaction_type.value


@dataclass(slots=True, frozen=True)
class FilterState:
    """Current type and date selection; both unset means no filtering."""

    filter_type: FilterType = FilterType.ALL
    filter_date: Optional[date] = None

    @classmethod
    def from_query(cls, filter_type: Optional[str], filter_date: Optional[str]) -> "FilterState":
        """Parse raw form/query values where an empty string means unset."""

        parsed_date: Optional[date] = None
        if filter_date and filter_date.strip():
            try:
                parsed_date = date.fromisoformat(filter_date.strip())
            except ValueError as error:
                raise ValueError(f"Invalid filter date: {filter_date}") from error
        return cls(filter_type=FilterType.from_str(filter_type), filter_date=parsed_date)

    @property
    def is_active(self) -> bool:
        return self.filter_type is not FilterType.ALL or self.filter_date is not None

    def as_dict(self) -> dict:
        return {
            "filter_type": self.filter_type.value,
            "filter_date": self.filter_date.isoformat() if self.filter_date else "",
        }


def calendar_day(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Return the calendar day of ``moment`` in the display time zone.

    Aware timestamps are converted to ``tz`` (the process-local zone when
    omitted). Naive timestamps are taken as already being local.
    """

    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def filter_transactions(
    transactions: Iterable[Transaction],
    filter_type: FilterType = FilterType.ALL,
    filter_date: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> List[Transaction]:
    """Return the transactions matching the type and calendar-day filters."""

    filtered = list(transactions)
    if filter_type is not FilterType.ALL:
        filtered = [t for t in filtered if filter_type.matches(t.transaction_type)]
    if filter_date is not None:
        filtered = [t for t in filtered if calendar_day(t.occurred_at, tz) == filter_date]
    return filtered


def apply_filter_state(
    transactions: Iterable[Transaction],
    state: FilterState,
    tz: Optional[tzinfo] = None,
) -> List[Transaction]:
    return filter_transactions(transactions, state.filter_type, state.filter_date, tz)
