"""Mini README: Centralised configuration for the Ledgerview interface.

Structure:
    * LedgerviewSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to discover where the transaction backend lives,
    which route prefix it uses, and where the web view should listen. Values
    are read once per process from ``LEDGERVIEW_*`` environment variables or
    a ``.env`` file; nothing reconfigures them at runtime.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class LedgerviewSettings(BaseSettings):
    """Runtime configuration for the transaction manager view."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    backend_url: Optional[str] = Field(
        None,
        description=(
            "Full base URL of the transaction backend. When unset the backend is"
            " assumed to run on localhost at ``backend_port``."
        ),
    )
    backend_port: int = Field(
        5000,
        description="Port of a backend running on localhost.",
        ge=1,
        le=65535,
    )
    api_prefix: str = Field(
        "/api",
        description="Route prefix of the backend API. Use an empty string for the legacy layout.",
    )
    request_timeout_seconds: Optional[float] = Field(
        None,
        description="Total timeout per backend request. Unset waits indefinitely.",
        gt=0,
    )
    resync_on_failed_delete: bool = Field(
        True,
        description="Refetch balance, summary and transactions even when a delete fails.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web view to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the web view exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level.")

    class Config:
        env_prefix = "LEDGERVIEW_"
        env_file = ".env"
        case_sensitive = False

    @validator("api_prefix", pre=True)
    def _normalise_prefix(cls, value: Optional[str]) -> str:
        """Ensure the prefix is either empty or a single leading-slash segment."""

        prefix = (value or "").strip().strip("/")
        return f"/{prefix}" if prefix else ""

    @validator("backend_url", pre=True)
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not str(value).strip():
            return None
        return str(value).strip().rstrip("/")

    @property
    def api_base_url(self) -> str:
        """Base URL including the route prefix, without a trailing slash."""

        root = self.backend_url or f"http://localhost:{self.backend_port}"
        return f"{root}{self.api_prefix}"


@lru_cache()
def get_settings() -> LedgerviewSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return LedgerviewSettings()
