"""Mini README: Shared fixtures for the Ledgerview test-suite.

Structure:
    * FakeTransactionApi - in-memory stand-in for the backend client that
      records every call and can be told to fail specific calls.
    * make_transaction / sample_transactions / fake_api fixtures.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest

from ledgerview.api import ApiError, ExportedFile
from ledgerview.finance import Summary, Transaction, TransactionType


def build_transaction(
    transaction_id: str,
    transaction_type: str,
    amount: float,
    occurred_at: str,
    description: str = "entry",
) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        transaction_type=TransactionType.from_str(transaction_type),
        amount=amount,
        description=description,
        occurred_at=datetime.fromisoformat(occurred_at),
    )


class FakeTransactionApi:
    """Backend double that keeps the three derived resources consistent."""

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None) -> None:
        self.transactions: List[Transaction] = list(transactions or [])
        self.calls: List[tuple] = []
        self.failures: Dict[str, ApiError] = {}
        self.export_content = b"type,amount,description,date\n"

    def count(self, name: str) -> int:
        return Counter(call[0] for call in self.calls)[name]

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def _summary(self) -> Summary:
        income = sum(t.amount for t in self.transactions if t.transaction_type is TransactionType.INCOME)
        expense = sum(t.amount for t in self.transactions if t.transaction_type is TransactionType.EXPENSE)
        return Summary(income=income, expense=expense)

    async def list_transactions(self) -> List[Transaction]:
        self._record("list_transactions")
        return list(self.transactions)

    async def get_balance(self) -> float:
        self._record("get_balance")
        summary = self._summary()
        return summary.income - summary.expense

    async def get_summary(self) -> Summary:
        self._record("get_summary")
        return self._summary()

    async def create_transaction(self, payload: Dict[str, Any]) -> int:
        self._record("create_transaction", payload)
        self.transactions.append(
            Transaction.from_payload({"id": str(len(self.transactions) + 100), **payload})
        )
        return 201

    async def delete_transaction(self, transaction_id: str) -> int:
        self._record("delete_transaction", transaction_id)
        self.transactions = [t for t in self.transactions if t.transaction_id != transaction_id]
        return 204

    async def export_transactions(self) -> ExportedFile:
        self._record("export_transactions")
        return ExportedFile(content=self.export_content)


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    return build_transaction


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """The two-entry ledger used by the filtering scenarios."""

    return [
        build_transaction("1", "income", 100.0, "2024-01-01T00:00:00", "salary"),
        build_transaction("2", "expense", 40.0, "2024-01-02T00:00:00", "groceries"),
    ]


@pytest.fixture
def fake_api(sample_transactions: List[Transaction]) -> FakeTransactionApi:
    return FakeTransactionApi(sample_transactions)
