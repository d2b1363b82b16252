"""Mini README: Render-ready rows and cards for the transaction dashboard.

Structure:
    * SummaryCard / TableRow - plain records consumed by templates and the CLI.
    * build_summary_cards - balance, income and expense cards.
    * build_table_rows - one row per displayed transaction, or a placeholder.
    * format_amount - currency formatting shared by every surface.

Keeping formatting here lets the Jinja2 template stay free of logic and
lets the CLI print the same table the browser shows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, List, Optional

from ..finance import Summary, Transaction, TransactionType, calendar_day

TABLE_COLUMNS = ("Type", "Amount", "Description", "Date", "Actions")
EMPTY_TABLE_MESSAGE = "No transactions found"


@dataclass(slots=True, frozen=True)
class SummaryCard:
    label: str
    value: str
    tone: str = "neutral"


@dataclass(slots=True, frozen=True)
class TableRow:
    """A transaction row, or the single placeholder row of an empty table."""

    transaction_id: Optional[str]
    type_label: str = ""
    tone: str = ""
    amount: str = ""
    description: str = ""
    date: str = ""
    placeholder: bool = False
    colspan: int = 1


def format_amount(value: float) -> str:
    """Render ``$<amount>`` dropping a trailing ``.0`` for whole values."""

    if float(value).is_integer():
        return f"${int(value)}"
    return f"${value}"


def build_summary_cards(balance: float, summary: Summary) -> List[SummaryCard]:
    return [
        SummaryCard("Current Balance", format_amount(balance)),
        SummaryCard("Total Income", format_amount(summary.income), tone="positive"),
        SummaryCard("Total Expense", format_amount(summary.expense), tone="negative"),
    ]


def build_table_rows(
    transactions: Iterable[Transaction], tz: Optional[tzinfo] = None
) -> List[TableRow]:
    """Return table rows; an empty input yields exactly one placeholder row."""

    rows = [
        TableRow(
            transaction_id=transaction.transaction_id,
            type_label=transaction.transaction_type.label,
            tone="positive" if transaction.transaction_type is TransactionType.INCOME else "negative",
            amount=format_amount(transaction.amount),
            description=transaction.description,
            date=calendar_day(transaction.occurred_at, tz).isoformat(),
        )
        for transaction in transactions
    ]
    if not rows:
        return [
            TableRow(
                transaction_id=None,
                description=EMPTY_TABLE_MESSAGE,
                placeholder=True,
                colspan=len(TABLE_COLUMNS),
            )
        ]
    return rows
