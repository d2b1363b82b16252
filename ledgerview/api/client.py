"""Mini README: Asynchronous client for the transaction backend.

Structure:
    * ApiError and subclasses - network, status and decode failures.
    * ExportedFile - CSV payload returned by the export endpoint.
    * TransactionApiClient - the six backend calls used by the view.

Every call opens a short-lived ``aiohttp.ClientSession`` so the client holds
no connection state between requests and can be shared freely. Failures are
raised as ``ApiError`` subclasses; deciding whether to log or surface them
is left to the caller.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import aiohttp

from ..finance import Summary, Transaction, parse_balance
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

EXPORT_FILENAME = "transactions.csv"


class ApiError(Exception):
    """Base class for failures talking to the transaction backend."""


class ApiConnectionError(ApiError):
    """The request never completed (connection refused, DNS, timeout)."""


class ApiStatusError(ApiError):
    """The backend answered with a non-2xx status."""

    def __init__(self, method: str, url: str, status: int, body: str = "") -> None:
        super().__init__(f"{method} {url} returned HTTP {status}")
        self.method = method
        self.url = url
        self.status = status
        self.body = body


class ApiDecodeError(ApiError):
    """The backend answered with a payload that could not be understood."""


@dataclass(slots=True, frozen=True)
class ExportedFile:
    """Downloadable export produced by the backend."""

    content: bytes
    filename: str = EXPORT_FILENAME
    media_type: str = "text/csv"


class TransactionApiClient:
    """Issue the backend requests the transaction view depends on."""

    def __init__(self, base_url: str, *, timeout_seconds: Optional[float] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Any) -> "TransactionApiClient":
        return cls(settings.api_base_url, timeout_seconds=settings.request_timeout_seconds)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Tuple[int, bytes, str]:
        url = self.url_for(path)
        LOGGER.debug("%s %s", method, url)
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.request(method, url, json=payload) as response:
                    body = await response.read()
                    status = response.status
                    content_type = response.headers.get("Content-Type", "")
        except aiohttp.ClientError as error:
            raise ApiConnectionError(f"{method} {url} failed: {error}") from error
        except asyncio.TimeoutError as error:
            raise ApiConnectionError(f"{method} {url} timed out") from error
        if not 200 <= status < 300:
            raise ApiStatusError(method, url, status, body.decode("utf-8", errors="replace"))
        return status, body, content_type

    async def _get_json(self, path: str) -> Any:
        _, body, _ = await self._request("GET", path)
        try:
            return json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as error:
            raise ApiDecodeError(f"GET {self.url_for(path)} returned malformed JSON") from error

    async def list_transactions(self) -> List[Transaction]:
        """Return every stored transaction in backend order."""

        payload = await self._get_json("transactions")
        if not isinstance(payload, list):
            raise ApiDecodeError("Transaction listing must be a JSON array")
        try:
            return [Transaction.from_payload(item) for item in payload]
        except ValueError as error:
            raise ApiDecodeError(str(error)) from error

    async def get_balance(self) -> float:
        payload = await self._get_json("balance")
        try:
            return parse_balance(payload)
        except ValueError as error:
            raise ApiDecodeError(str(error)) from error

    async def get_summary(self) -> Summary:
        payload = await self._get_json("summary")
        try:
            return Summary.from_payload(payload)
        except ValueError as error:
            raise ApiDecodeError(str(error)) from error

    async def create_transaction(self, payload: Dict[str, Any]) -> int:
        """POST a new transaction and return the (2xx) status code."""

        status, _, _ = await self._request("POST", "transactions", payload=payload)
        LOGGER.info("Created %s transaction of %s", payload.get("type"), payload.get("amount"))
        return status

    async def delete_transaction(self, transaction_id: str) -> int:
        """DELETE one transaction; the opaque id is sent as a single path segment."""

        status, _, _ = await self._request("DELETE", f"transactions/{quote(transaction_id, safe='')}")
        LOGGER.info("Deleted transaction %s", transaction_id)
        return status

    async def export_transactions(self) -> ExportedFile:
        """Download the CSV export."""

        _, body, content_type = await self._request("GET", "transactions/export")
        media_type = content_type.split(";")[0].strip() or "text/csv"
        return ExportedFile(content=body, media_type=media_type)
