"""Mini README: The transaction view state container.

Structure:
    * TransactionApi - protocol of the backend calls the view needs.
    * Mutation - identifiers of the user-triggered operations.
    * TransactionView - fetchers, mutations, filters and the add form.

The view mirrors three backend resources (transactions, balance, summary)
and never patches them locally: after any mutation it publishes an
invalidation and all three are fetched again. Backend failures are logged
and recorded on the affected operation's state; they never propagate out
of the view. Only invalid user input raises (``ValueError``).
"""

from __future__ import annotations

import asyncio
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from ..api import ApiError, ExportedFile
from ..finance import (
    FilterState,
    Summary,
    Transaction,
    TransactionDraft,
    apply_filter_state,
)
from ..logging_utils import get_logger
from .events import InvalidationBus
from .operations import OperationState, ResourceSlot

LOGGER = get_logger(__name__)


class TransactionApi(Protocol):
    """Backend calls consumed by ``TransactionView``."""

    async def list_transactions(self) -> List[Transaction]: ...

    async def get_balance(self) -> float: ...

    async def get_summary(self) -> Summary: ...

    async def create_transaction(self, payload: Dict[str, Any]) -> int: ...

    async def delete_transaction(self, transaction_id: str) -> int: ...

    async def export_transactions(self) -> ExportedFile: ...


class Mutation(str, Enum):
    ADD = "add"
    DELETE = "delete"
    EXPORT = "export"


def _now() -> datetime:
    return datetime.now().astimezone()


class TransactionView:
    """Client-side mirror of the backend plus the local filter and form state."""

    def __init__(
        self,
        api: TransactionApi,
        *,
        bus: Optional[InvalidationBus] = None,
        resync_on_failed_delete: bool = True,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self.api = api
        self.bus = bus or InvalidationBus()
        self.resync_on_failed_delete = resync_on_failed_delete
        self.tz = tz
        self._clock = clock

        self.transactions: ResourceSlot[List[Transaction]] = ResourceSlot("transactions", [])
        self.balance: ResourceSlot[float] = ResourceSlot("balance", 0.0)
        self.summary: ResourceSlot[Summary] = ResourceSlot("summary", Summary())
        self.mutations: Dict[Mutation, OperationState] = {
            mutation: OperationState() for mutation in Mutation
        }

        self.filters = FilterState()
        self.form = TransactionDraft()
        self.displayed: List[Transaction] = []

        self._unsubscribe = self.bus.subscribe(self._on_invalidated)

    # -- derived views -------------------------------------------------

    @property
    def busy(self) -> bool:
        """True while any mutation runs; drives the blocking overlay."""

        return any(state.in_flight for state in self.mutations.values())

    @property
    def loading(self) -> Dict[str, bool]:
        return {slot.name: slot.state.in_flight for slot in self._slots()}

    @property
    def any_in_flight(self) -> bool:
        return self.busy or any(self.loading.values())

    @property
    def notices(self) -> List[str]:
        """Messages of operations whose last attempt failed."""

        messages = [
            f"Could not load {slot.name}: {slot.state.error}"
            for slot in self._slots()
            if slot.state.error
        ]
        messages.extend(
            f"Could not {mutation.value} transaction: {state.error}"
            if mutation is not Mutation.EXPORT
            else f"Could not export transactions: {state.error}"
            for mutation, state in self.mutations.items()
            if state.error
        )
        return messages

    def _slots(self) -> List[ResourceSlot[Any]]:
        return [self.transactions, self.balance, self.summary]

    def _rederive(self) -> None:
        self.displayed = apply_filter_state(self.transactions.value, self.filters, self.tz)

    # -- fetchers --------------------------------------------------------

    async def mount(self, filters: Optional[FilterState] = None) -> List[Transaction]:
        """Start a page load: fetch all three resources and apply ``filters``.

        Every load refetches, and filter state from an earlier load is
        discarded (no ``filters`` means unfiltered). Returns the displayed
        list for this load.
        """

        await self.refresh_all()
        self.set_filters(filters or FilterState())
        return self.displayed

    async def refresh_all(self) -> None:
        await asyncio.gather(self.fetch_transactions(), self.fetch_balance(), self.fetch_summary())

    async def _fetch(self, slot: ResourceSlot[Any], request: Callable[[], Awaitable[Any]]) -> bool:
        """Run ``request`` for ``slot``; report whether its result was applied."""

        token = slot.issue()
        try:
            value = await request()
        except ApiError as error:
            LOGGER.warning("Error fetching %s: %s", slot.name, error)
            slot.reject(token, error)
            return False
        except BaseException as error:
            slot.reject(token, error)
            raise
        return slot.resolve(token, value)

    async def fetch_transactions(self) -> None:
        if await self._fetch(self.transactions, self.api.list_transactions):
            self._rederive()
            LOGGER.debug("Loaded %s transactions", len(self.transactions.value))

    async def fetch_balance(self) -> None:
        await self._fetch(self.balance, self.api.get_balance)

    async def fetch_summary(self) -> None:
        await self._fetch(self.summary, self.api.get_summary)

    async def _on_invalidated(self, reason: str) -> None:
        LOGGER.debug("Resynchronising after %s", reason)
        await self.refresh_all()

    # -- local state -----------------------------------------------------

    def set_filters(self, filters: FilterState) -> None:
        self.filters = filters
        self._rederive()

    # -- mutations -------------------------------------------------------

    async def add_transaction(self, draft: Optional[TransactionDraft] = None) -> bool:
        """Submit ``draft`` (or the current form); return True on a 2xx answer.

        Raises ``ValueError`` for an incomplete or invalid draft before any
        request is made. On success the form resets to its defaults.
        """

        if draft is not None:
            self.form = draft
        payload = self.form.to_payload(self._clock())
        with self.mutations[Mutation.ADD].running() as state:
            try:
                await self.api.create_transaction(payload)
            except ApiError as error:
                LOGGER.warning("Error adding transaction: %s", error)
                state.fail(error)
                return False
            self.form = TransactionDraft()
            await self.bus.publish(Mutation.ADD.value)
        return True

    async def delete_transaction(self, transaction_id: str) -> bool:
        """Delete by identifier, then resynchronise.

        The resync also runs after a failed delete unless
        ``resync_on_failed_delete`` is disabled.
        """

        error: Optional[ApiError] = None
        with self.mutations[Mutation.DELETE].running() as state:
            try:
                await self.api.delete_transaction(transaction_id)
            except ApiError as caught:
                LOGGER.warning("Error deleting transaction %s: %s", transaction_id, caught)
                error = caught
            if error is None or self.resync_on_failed_delete:
                await self.bus.publish(Mutation.DELETE.value)
            if error is not None:
                state.fail(error)
        return error is None

    async def export_csv(self) -> Optional[ExportedFile]:
        """Fetch the CSV export; returns None when the backend call fails."""

        exported: Optional[ExportedFile] = None
        with self.mutations[Mutation.EXPORT].running() as state:
            try:
                exported = await self.api.export_transactions()
            except ApiError as error:
                LOGGER.warning("Error exporting CSV: %s", error)
                state.fail(error)
            await self.bus.publish(Mutation.EXPORT.value)
        return exported

    def close(self) -> None:
        """Detach from the invalidation bus."""

        self._unsubscribe()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly view of everything the dashboard renders."""

        return {
            "busy": self.busy,
            "loading": self.loading,
            "operations": {
                **{slot.name: slot.state.as_dict() for slot in self._slots()},
                **{mutation.value: state.as_dict() for mutation, state in self.mutations.items()},
            },
            "filters": self.filters.as_dict(),
            "form": self.form.as_dict(),
            "balance": self.balance.value,
            "summary": self.summary.value.as_dict(),
            "transactions": [transaction.as_dict() for transaction in self.displayed],
            "notices": self.notices,
        }
