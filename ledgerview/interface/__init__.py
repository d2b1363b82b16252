"""Mini README: Interactive interfaces for Ledgerview.

Exports the FastAPI application factory that renders the transaction
manager page, plus the presentation helpers shared with the CLI.
"""

from .presentation import build_summary_cards, build_table_rows, format_amount
from .web_app import create_application

__all__ = ["build_summary_cards", "build_table_rows", "create_application", "format_amount"]
