"""Mini README: State container and coordination primitives for the view.

Exports ``TransactionView`` together with the operation status types and
the invalidation bus that links mutations to the data fetchers.
"""

from .events import InvalidationBus
from .operations import OperationState, OperationStatus, ResourceSlot
from .view import Mutation, TransactionApi, TransactionView

__all__ = [
    "InvalidationBus",
    "Mutation",
    "OperationState",
    "OperationStatus",
    "ResourceSlot",
    "TransactionApi",
    "TransactionView",
]
