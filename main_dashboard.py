"""Mini README: Entry point CLI for the FLOYM Learning Hub ledger.

This script exposes a Typer CLI to serve the JSON API with uvicorn or to
print the dashboard figures for the file-backed ledger straight to the
terminal. Settings come from ``FLOYM_*`` environment variables when present.
"""

from __future__ import annotations

import typer
import uvicorn

from floymhub.configuration import get_settings
from floymhub.ledger import LedgerStore
from floymhub.logging_utils import configure_root_logger
from floymhub.reporting import ReportingEngine, format_currency
from floymhub.storage import JsonFileKeyValueStore

cli = typer.Typer(help="Serve and inspect the FLOYM Learning Hub ledger.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the JSON API using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    typer.echo(f"Serving the ledger API on http://{effective_host}:{effective_port}")
    uvicorn.run(
        "floymhub.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def summary() -> None:
    """Print dashboard figures and upcoming exams for the stored ledger."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    store = LedgerStore.load(
        JsonFileKeyValueStore(settings.data_directory),
        key_prefix=settings.storage_key_prefix,
        invoice_number_base=settings.invoice_number_base,
    )
    engine = ReportingEngine(store)
    stats = engine.dashboard_stats()

    typer.echo(f"Students:        {stats.total_students}")
    typer.echo(f"Income:          {format_currency(stats.total_income)}")
    typer.echo(f"Expenses:        {format_currency(stats.total_expenses)}")
    typer.echo(f"Pending:         {format_currency(stats.pending_payments)}")
    typer.echo(f"Net profit:      {format_currency(stats.net_profit)}")
    typer.echo(f"Upcoming exams:  {stats.upcoming_exams_count}")
    for booking in engine.upcoming_exams(settings.upcoming_exam_limit):
        student = store.resolve_student(booking.student_id)
        typer.echo(
            f"  {booking.date.isoformat()}  {booking.level:<10} {booking.status.value:<8} "
            f"{student.name if student else 'Unknown'}"
        )


if __name__ == "__main__":
    cli()
