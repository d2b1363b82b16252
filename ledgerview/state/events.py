"""Mini README: Invalidation signalling between mutations and fetchers.

Structure:
    * InvalidationBus - publish/subscribe hub for "backend state changed".

Mutations publish once they complete; every subscribed fetcher re-runs.
Listeners are awaited together so a publish returns only after all
resynchronisation has finished.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Listener = Callable[[str], Awaitable[None]]


class InvalidationBus:
    """Fan an invalidation reason out to every registered listener."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, reason: str) -> None:
        listeners = list(self._listeners)
        LOGGER.debug("Invalidation '%s' -> %s listeners", reason, len(listeners))
        results = await asyncio.gather(
            *(listener(reason) for listener in listeners), return_exceptions=True
        )
        for listener, result in zip(listeners, results):
            if isinstance(result, Exception):
                LOGGER.error(
                    "Listener %r failed handling invalidation '%s'",
                    listener,
                    reason,
                    exc_info=result,
                )
