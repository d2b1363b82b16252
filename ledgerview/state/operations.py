"""Mini README: Per-operation status tracking for the transaction view.

Structure:
    * OperationStatus - idle / in_flight / succeeded / failed.
    * OperationState - status plus the message of the last failure.
    * ResourceSlot - a fetched value guarded by request-sequence tokens.

Each fetcher and mutation owns one state object instead of sharing an
ambient busy flag. ``ResourceSlot`` numbers every request it issues and
only accepts the completion carrying the newest number, so a slow response
can never overwrite a fresher one.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Iterator, Optional, TypeVar

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


class OperationStatus(str, Enum):
    """Lifecycle of a single fetch or mutation."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class OperationState:
    """Status of one operation and the reason it last failed, if any."""

    status: OperationStatus = OperationStatus.IDLE
    error: Optional[str] = None

    @property
    def in_flight(self) -> bool:
        return self.status is OperationStatus.IN_FLIGHT

    def start(self) -> None:
        self.status = OperationStatus.IN_FLIGHT

    def succeed(self) -> None:
        self.status = OperationStatus.SUCCEEDED
        self.error = None

    def fail(self, error: object) -> None:
        self.status = OperationStatus.FAILED
        self.error = str(error) or type(error).__name__

    @contextmanager
    def running(self) -> Iterator["OperationState"]:
        """Hold the state in flight for the block; it never stays in flight afterwards.

        A block that records its own failure keeps it. A block that finishes
        while still in flight succeeds, and one that raises fails.
        """

        self.start()
        try:
            yield self
        except BaseException as error:
            self.fail(error)
            raise
        else:
            if self.in_flight:
                self.succeed()

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {"status": self.status.value, "error": self.error}


class ResourceSlot(Generic[T]):
    """Hold the latest accepted value of a backend resource."""

    def __init__(self, name: str, initial: T) -> None:
        self.name = name
        self.value: T = initial
        self.state = OperationState()
        self._issued = 0

    def issue(self) -> int:
        """Mark a new request as in flight and return its token."""

        self._issued += 1
        self.state.start()
        return self._issued

    def is_current(self, token: int) -> bool:
        return token == self._issued

    def resolve(self, token: int, value: T) -> bool:
        """Apply ``value`` if ``token`` is the newest request; report whether it was."""

        if not self.is_current(token):
            LOGGER.debug(
                "Discarding stale %s response (token %s, latest %s)", self.name, token, self._issued
            )
            return False
        self.value = value
        self.state.succeed()
        return True

    def reject(self, token: int, error: object) -> bool:
        """Record a failure for ``token``; prior value is left untouched."""

        if not self.is_current(token):
            LOGGER.debug("Ignoring stale %s failure (token %s)", self.name, token)
            return False
        self.state.fail(error)
        return True
