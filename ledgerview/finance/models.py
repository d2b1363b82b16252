"""Mini README: Client-side mirrors of the backend's finance records.

Structure:
    * TransactionType - enum representing income versus expense entries.
    * Transaction - dataclass mirroring a stored backend transaction.
    * Summary - aggregate income and expense totals.
    * TransactionDraft - add-form values awaiting submission.

The backend owns persistence and aggregation; these types only parse what
it returns and shape what the add form sends. Parsing is strict so that a
malformed payload is reported as a failed fetch rather than rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class TransactionType(str, Enum):
    """Enumerate the supported transaction categories."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: str) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported transaction type: {value}") from error

    @property
    def label(self) -> str:
        return self.value.capitalize()


def parse_timestamp(value: object) -> datetime:
    """Parse ISO 8601 strings (``Z`` suffix and bare dates included)."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as error:
            raise ValueError(f"Invalid timestamp: {value!r}") from error
    raise ValueError("Timestamps must be provided as ISO strings or date/datetime instances.")


def _parse_amount(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValueError(f"Invalid amount: {value!r}") from error
    if amount != amount or amount < 0:
        raise ValueError(f"Amount must be a non-negative number, got {value!r}")
    return amount


@dataclass(slots=True, frozen=True)
class Transaction:
    """Represent a stored transaction as returned by the backend."""

    transaction_id: str
    transaction_type: TransactionType
    amount: float
    description: str
    occurred_at: datetime

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Transaction":
        """Build a transaction from a backend JSON object.

        Identifiers are read from ``id`` and fall back to ``_id`` for
        document-store backends.
        """

        if not isinstance(payload, Mapping):
            raise ValueError(f"Transaction payload must be an object, got {type(payload).__name__}")
        identifier = payload.get("id", payload.get("_id"))
        if identifier is None or str(identifier) == "":
            raise ValueError("Transaction payload is missing an identifier")
        try:
            raw_type = payload["type"]
            raw_amount = payload["amount"]
            raw_date = payload["date"]
        except KeyError as error:
            raise ValueError(f"Transaction payload is missing field {error.args[0]!r}") from error
        return cls(
            transaction_id=str(identifier),
            transaction_type=TransactionType.from_str(str(raw_type)),
            amount=_parse_amount(raw_amount),
            description=str(payload.get("description") or ""),
            occurred_at=parse_timestamp(raw_date),
        )

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        return {
            "id": self.transaction_id,
            "type": self.transaction_type.value,
            "amount": self.amount,
            "description": self.description,
            "date": self.occurred_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class Summary:
    """Income and expense totals recomputed by the backend."""

    income: float = 0.0
    expense: float = 0.0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Summary":
        if not isinstance(payload, Mapping):
            raise ValueError("Summary payload must be an object")
        try:
            return cls(income=float(payload["income"]), expense=float(payload["expense"]))
        except (KeyError, TypeError, ValueError) as error:
            raise ValueError(f"Malformed summary payload: {payload!r}") from error

    def as_dict(self) -> Dict[str, float]:
        return {"income": self.income, "expense": self.expense}


def parse_balance(payload: Mapping[str, Any]) -> float:
    """Extract the balance figure from a ``{"balance": ...}`` payload."""

    if not isinstance(payload, Mapping) or "balance" not in payload:
        raise ValueError(f"Malformed balance payload: {payload!r}")
    try:
        return float(payload["balance"])
    except (TypeError, ValueError) as error:
        raise ValueError(f"Malformed balance payload: {payload!r}") from error


@dataclass(slots=True)
class TransactionDraft:
    """Values held by the add-transaction form.

    ``amount`` and ``description`` stay as raw strings until submission so
    the form can be re-rendered exactly as the user left it after a failure.
    """

    transaction_type: TransactionType = TransactionType.INCOME
    amount: str = ""
    description: str = ""

    @classmethod
    def from_form(cls, transaction_type: str, amount: object, description: str) -> "TransactionDraft":
        return cls(
            transaction_type=TransactionType.from_str(transaction_type),
            amount="" if amount is None else str(amount),
            description=description or "",
        )

    def to_payload(self, now: Optional[datetime] = None) -> Dict[str, object]:
        """Return the POST body, stamping the creation time."""

        description = self.description.strip()
        if not description:
            raise ValueError("Description is required.")
        if not self.amount.strip():
            raise ValueError("Amount is required.")
        stamped = now or datetime.now().astimezone()
        return {
            "type": self.transaction_type.value,
            "amount": _parse_amount(self.amount.strip()),
            "description": description,
            "date": stamped.isoformat(),
        }

    def as_dict(self) -> Dict[str, str]:
        return {
            "type": self.transaction_type.value,
            "amount": self.amount,
            "description": self.description,
        }
