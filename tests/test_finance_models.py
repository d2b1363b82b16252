"""Mini README: Tests for parsing backend records and shaping the add form.

Structure:
    * Transaction.from_payload accepts ``id``/``_id`` and ISO timestamps.
    * Malformed payloads raise ``ValueError``.
    * TransactionDraft.to_payload stamps the creation time and coerces amounts.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ledgerview.finance import Summary, Transaction, TransactionDraft, TransactionType, parse_balance


def test_from_payload_reads_document_style_identifier() -> None:
    """Backends keyed by ``_id`` should parse the same as those using ``id``."""

    transaction = Transaction.from_payload(
        {
            "_id": "65a1f0",
            "type": "Expense",
            "amount": "12.5",
            "description": "Lunch",
            "date": "2024-03-05T12:30:00.000Z",
        }
    )

    assert transaction.transaction_id == "65a1f0"
    assert transaction.transaction_type is TransactionType.EXPENSE
    assert transaction.amount == pytest.approx(12.5)
    assert transaction.occurred_at == datetime(2024, 3, 5, 12, 30, tzinfo=timezone.utc)
    assert transaction.as_dict()["id"] == "65a1f0"


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "income", "amount": 1, "description": "x", "date": "2024-01-01"},
        {"id": "1", "type": "transfer", "amount": 1, "description": "x", "date": "2024-01-01"},
        {"id": "1", "type": "income", "amount": -5, "description": "x", "date": "2024-01-01"},
        {"id": "1", "type": "income", "amount": 1, "description": "x", "date": "yesterday"},
        {"id": "1", "type": "income", "description": "x", "date": "2024-01-01"},
    ],
)
def test_from_payload_rejects_malformed_records(payload: dict) -> None:
    with pytest.raises(ValueError):
        Transaction.from_payload(payload)


def test_summary_and_balance_parsing() -> None:
    assert Summary.from_payload({"income": 100, "expense": 40}) == Summary(100.0, 40.0)
    assert parse_balance({"balance": 60}) == pytest.approx(60.0)
    with pytest.raises(ValueError):
        parse_balance({"total": 60})
    with pytest.raises(ValueError):
        Summary.from_payload({"income": 1})


def test_draft_payload_stamps_creation_time() -> None:
    """The add form sends type, numeric amount, description and the current time."""

    now = datetime(2024, 6, 1, 9, 15, tzinfo=timezone.utc)
    draft = TransactionDraft.from_form("expense", "25", "coffee")

    payload = draft.to_payload(now)

    assert payload == {
        "type": "expense",
        "amount": 25.0,
        "description": "coffee",
        "date": "2024-06-01T09:15:00+00:00",
    }


@pytest.mark.parametrize(
    "amount, description",
    [("", "coffee"), ("abc", "coffee"), ("-3", "coffee"), ("4", "   ")],
)
def test_draft_payload_requires_valid_fields(amount: str, description: str) -> None:
    draft = TransactionDraft.from_form("income", amount, description)

    with pytest.raises(ValueError):
        draft.to_payload()


def test_draft_defaults_match_empty_form() -> None:
    assert TransactionDraft().as_dict() == {"type": "income", "amount": "", "description": ""}
