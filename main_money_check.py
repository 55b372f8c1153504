"""Mini README: Entry point CLI for the Money Check ledger.

This script exposes a Typer CLI that starts the HTTP service, writes CSV
exports, and prints the profit rollup. Settings come from ``MONEYCHECK_``
environment variables (or a ``.env`` file) and can be overridden per command.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from moneycheck.configuration import get_settings
from moneycheck.export import CsvExporter, format_amount
from moneycheck.logging_utils import configure_root_logger
from moneycheck.workspace import LedgerWorkspace

cli = typer.Typer(help="Record, settle and export the Money Check ledger.")


def _open_workspace(data_directory: Optional[Path]) -> LedgerWorkspace:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    return LedgerWorkspace.open(data_directory or settings.data_directory)


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

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Money Check on {effective_host}:{effective_port}.\n"
        f"API available at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "moneycheck.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def export(
    scope: str = typer.Argument("ledger", help="ledger, settlement or profit."),
    month: Optional[str] = typer.Option(None, help="Limit a ledger export to YYYY-MM."),
    key: Optional[str] = typer.Option(None, help="Event key for a settlement export."),
    data_directory: Optional[Path] = typer.Option(None, help="Directory holding the documents."),
    output: Optional[Path] = typer.Option(None, help="Directory to write the CSV file into."),
) -> None:
    """Write one CSV export to disk."""

    workspace = _open_workspace(data_directory)
    exporter = CsvExporter(workspace)
    if scope == "ledger":
        document = exporter.ledger(month)
    elif scope == "settlement":
        if not key:
            raise typer.BadParameter("--key is required for settlement exports")
        document = exporter.settlement(key)
    elif scope == "profit":
        document = exporter.profit()
    else:
        raise typer.BadParameter(f"Unknown export scope: {scope}")
    destination = document.write(output or get_settings().resolved_export_directory)
    typer.echo(f"Wrote {destination}")


@cli.command()
def summary(
    data_directory: Optional[Path] = typer.Option(None, help="Directory holding the documents."),
) -> None:
    """Print each counted settlement and the period profit."""

    workspace = _open_workspace(data_directory)
    totals = workspace.profit_overview()
    for line in totals.lines:
        marker = "x" if line.counted else " "
        typer.echo(f"[{marker}] {line.month or '-':7} {line.event_name:30} {format_amount(line.amount)}")
    for expense in totals.expenses:
        typer.echo(f"[-] {'':7} {expense.label:30} {format_amount(expense.amount)}")
    typer.echo(
        f"income {format_amount(totals.total_income)} | "
        f"expense {format_amount(totals.total_expense)} | "
        f"profit {format_amount(totals.total_profit)}"
    )


if __name__ == "__main__":
    cli()
