"""Mini README: Entry point CLI for the Ledgerview transaction manager.

This script exposes a Typer CLI that starts the FastAPI page with
configurable host, port, and production flags, and offers two terminal
shortcuts against the same backend: ``show`` prints the summary and the
filtered history, ``export`` saves the CSV export to disk.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from ledgerview.api import EXPORT_FILENAME
from ledgerview.configuration import get_settings
from ledgerview.finance import FilterState
from ledgerview.interface import build_summary_cards, build_table_rows
from ledgerview.interface.web_app import build_view
from ledgerview.logging_utils import configure_root_logger

cli = typer.Typer(help="Launch and use the Ledgerview transaction manager.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 / :: wildcard, so point at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Ledgerview on "
        f"{effective_host}:{effective_port} (backend {settings.api_base_url}).\n"
        "Open your browser at "
        f"http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "ledgerview.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def show(
    transaction_type: str = typer.Option("all", "--type", help="all, income or expense."),
    on: Optional[str] = typer.Option(None, "--date", help="Only show this day (YYYY-MM-DD)."),
) -> None:
    """Print the balance, totals and transaction history."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        filters = FilterState.from_query(transaction_type, on)
    except ValueError as error:
        raise typer.BadParameter(str(error)) from error

    view = build_view(settings)
    displayed = asyncio.run(view.mount(filters))
    view.close()

    for card in build_summary_cards(view.balance.value, view.summary.value):
        typer.echo(f"{card.label:<16} {card.value}")
    typer.echo("")
    for row in build_table_rows(displayed, view.tz):
        if row.placeholder:
            typer.echo(row.description)
        else:
            typer.echo(
                f"{row.transaction_id:<26} {row.type_label:<8} {row.amount:>12}  {row.date}  {row.description}"
            )
    for notice in view.notices:
        typer.secho(notice, fg=typer.colors.RED, err=True)


@cli.command()
def export(
    output: Path = typer.Option(Path(EXPORT_FILENAME), help="Where to write the CSV."),
) -> None:
    """Download the backend CSV export to a file."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    view = build_view(settings)
    exported = asyncio.run(view.export_csv())
    view.close()
    if exported is None:
        typer.secho("Export failed: " + "; ".join(view.notices), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    output.write_bytes(exported.content)
    typer.echo(f"Wrote {len(exported.content)} bytes to {output}")


if __name__ == "__main__":
    cli()
