"""Mini README: Tests for the aiohttp backend client.

A throwaway aiohttp application plays the backend so the client's routes,
payloads and error mapping are checked over real HTTP.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as BackendServer

from ledgerview.api import (
    ApiConnectionError,
    ApiDecodeError,
    ApiStatusError,
    TransactionApiClient,
)
from ledgerview.finance import Summary, TransactionType


def _backend(recorded: List[tuple], *, prefix: str = "/api", malformed: bool = False) -> web.Application:
    async def list_transactions(request: web.Request) -> web.Response:
        if malformed:
            return web.Response(text="<html>oops</html>", content_type="application/json")
        return web.json_response(
            [
                {"_id": "1", "type": "income", "amount": 100, "description": "salary", "date": "2024-01-01T00:00:00Z"},
                {"_id": "2", "type": "expense", "amount": 40, "description": "food", "date": "2024-01-02T00:00:00Z"},
            ]
        )

    async def balance(request: web.Request) -> web.Response:
        return web.json_response({"balance": 60})

    async def summary(request: web.Request) -> web.Response:
        return web.json_response({"income": 100, "expense": 40})

    async def create(request: web.Request) -> web.Response:
        recorded.append(("POST", request.path, await request.json()))
        return web.json_response({"_id": "3"}, status=201)

    async def delete(request: web.Request) -> web.Response:
        recorded.append(("DELETE", request.path))
        if request.match_info["transaction_id"] == "a b?c":
            recorded.append(("RAW", request.raw_path))
        if request.match_info["transaction_id"] == "missing":
            return web.json_response({"error": "not found"}, status=404)
        return web.Response(status=204)

    async def export(request: web.Request) -> web.Response:
        return web.Response(body=b"type,amount\nincome,100\n", content_type="text/csv")

    app = web.Application()
    app.router.add_get(f"{prefix}/transactions/export", export)
    app.router.add_get(f"{prefix}/transactions", list_transactions)
    app.router.add_post(f"{prefix}/transactions", create)
    app.router.add_delete(f"{prefix}/transactions/{{transaction_id}}", delete)
    app.router.add_get(f"{prefix}/balance", balance)
    app.router.add_get(f"{prefix}/summary", summary)
    return app


def _against(app: web.Application, prefix: str, call: Callable[[TransactionApiClient], Awaitable[Any]]) -> Any:
    async def scenario() -> Any:
        async with BackendServer(app) as server:
            client = TransactionApiClient(str(server.make_url(prefix)))
            return await call(client)

    return asyncio.run(scenario())


def test_reads_transactions_balance_and_summary() -> None:
    async def read_all(client: TransactionApiClient) -> tuple:
        return (
            await client.list_transactions(),
            await client.get_balance(),
            await client.get_summary(),
        )

    transactions, balance, summary = _against(_backend([]), "/api", read_all)

    assert [t.transaction_id for t in transactions] == ["1", "2"]
    assert transactions[1].transaction_type is TransactionType.EXPENSE
    assert balance == pytest.approx(60.0)
    assert summary == Summary(100.0, 40.0)


def test_create_posts_json_body() -> None:
    recorded: List[tuple] = []
    payload = {"type": "expense", "amount": 25.0, "description": "coffee", "date": "2024-06-01T09:00:00+00:00"}

    status = _against(_backend(recorded), "/api", lambda client: client.create_transaction(payload))

    assert status == 201
    assert recorded == [("POST", "/api/transactions", payload)]


def test_delete_targets_transaction_path_and_maps_status_errors() -> None:
    recorded: List[tuple] = []

    async def delete_both(client: TransactionApiClient) -> tuple:
        status = await client.delete_transaction("2")
        with pytest.raises(ApiStatusError) as excinfo:
            await client.delete_transaction("missing")
        return status, excinfo.value.status

    assert _against(_backend(recorded), "/api", delete_both) == (204, 404)
    assert recorded == [("DELETE", "/api/transactions/2"), ("DELETE", "/api/transactions/missing")]


def test_delete_quotes_identifier_into_one_segment() -> None:
    recorded: List[tuple] = []

    status = _against(_backend(recorded), "/api", lambda client: client.delete_transaction("a b?c"))

    assert status == 204
    assert recorded == [("DELETE", "/api/transactions/a b?c"), ("RAW", "/api/transactions/a%20b%3Fc")]


def test_export_returns_csv_bytes() -> None:
    exported = _against(_backend([]), "/api", lambda client: client.export_transactions())

    assert exported.content.startswith(b"type,amount")
    assert exported.media_type == "text/csv"
    assert exported.filename == "transactions.csv"


def test_legacy_layout_without_prefix() -> None:
    transactions = _against(_backend([], prefix=""), "", lambda client: client.list_transactions())

    assert len(transactions) == 2


def test_malformed_json_raises_decode_error() -> None:
    with pytest.raises(ApiDecodeError):
        _against(_backend([], malformed=True), "/api", lambda client: client.list_transactions())


def test_unreachable_backend_raises_connection_error() -> None:
    client = TransactionApiClient("http://127.0.0.1:1/api", timeout_seconds=5)

    with pytest.raises(ApiConnectionError):
        asyncio.run(client.get_balance())
