"""Mini README: Core package initializer for the Ledgerview transaction manager.

This module exposes convenience imports so callers can reach the logging
helpers without knowing the module layout. The heavier pieces (HTTP client,
state container, web application) are imported from their subpackages.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
