"""Mini README: Backend access for the transaction view.

Exports the aiohttp-based ``TransactionApiClient`` and the ``ApiError``
hierarchy it raises.
"""

from .client import (
    EXPORT_FILENAME,
    ApiConnectionError,
    ApiDecodeError,
    ApiError,
    ApiStatusError,
    ExportedFile,
    TransactionApiClient,
)

__all__ = [
    "EXPORT_FILENAME",
    "ApiConnectionError",
    "ApiDecodeError",
    "ApiError",
    "ApiStatusError",
    "ExportedFile",
    "TransactionApiClient",
]
