"""Command-line interface for the batch timer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import TrackerSettings
from .db import SqliteStore
from .errors import InvalidRangeError
from .paths import get_store_path
from .reporting import FOOTER_LIVE_LOG, FOOTER_PER_ROW, SummaryPrinter, format_time
from .session import TrackerSession
from .storage import PersistenceGateway

app = typer.Typer(help="Interval timer with per-batch summaries.")
log_app = typer.Typer(help="Inspect and edit the interval log.", no_args_is_help=True)
table_app = typer.Typer(help="Inspect and edit the summary table.", no_args_is_help=True)
app.add_typer(log_app, name="log")
app.add_typer(table_app, name="table")


@app.callback(no_args_is_help=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the SQLite store.",
    ),
    footer_average: str = typer.Option(
        FOOTER_PER_ROW,
        "--footer-average",
        help=(
            f"Footer average divisor: '{FOOTER_PER_ROW}' batch counts "
            f"or the '{FOOTER_LIVE_LOG}' length."
        ),
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        settings = TrackerSettings.from_options(footer_average=footer_average)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--footer-average") from exc
    ctx.obj = {"db_path": db_path or get_store_path(), "settings": settings}


def _open_session(ctx: typer.Context) -> TrackerSession:
    store = SqliteStore(ctx.obj["db_path"])
    return TrackerSession.restore(PersistenceGateway(store), ctx.obj["settings"])


def _confirmer(assume_yes: bool):
    if assume_yes:
        return lambda _prompt: True
    return typer.confirm


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the interval log and the summary table."""
    session = _open_session(ctx)
    printer = SummaryPrinter(footer_mode=session.settings.footer_average)
    printer.print_log(session.log.entries)
    print()
    printer.print_table(session.table.rows, live_log_length=len(session.log))


@log_app.command("add")
def log_add(
    ctx: typer.Context,
    time: str = typer.Option("00:00:00", "--time", "-t", help="Duration as HH:MM:SS."),
    random_time: bool = typer.Option(
        False, "--random", help="Pick a random duration between --min and --max."
    ),
    min_time: Optional[str] = typer.Option(
        None, "--min", help="Lower bound for --random (default 00:01:30)."
    ),
    max_time: Optional[str] = typer.Option(
        None, "--max", help="Upper bound for --random (default 00:02:55)."
    ),
    quantity: str = typer.Option("30", "--quantity", "-q", help="Quantity for this interval."),
) -> None:
    """Record one interval."""
    session = _open_session(ctx)
    if random_time:
        try:
            session.randomize(min_time, max_time)
        except InvalidRangeError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
    else:
        session.set_elapsed_text(time)
    entry = session.commit(quantity)
    totals = session.log.totals
    typer.echo(
        f"Recorded {format_time(entry.duration_seconds)} with quantity {entry.quantity}. "
        f"Total: {format_time(totals.total_duration)} ({totals.total_quantity})."
    )


@log_app.command("delete")
def log_delete(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Zero-based position of the interval."),
) -> None:
    """Delete one interval."""
    session = _open_session(ctx)
    if session.delete_entry(index):
        typer.echo(f"Deleted interval {index}.")
    else:
        typer.echo(f"No interval at position {index}.")


@log_app.command("clear")
def log_clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete every interval."""
    session = _open_session(ctx)
    if session.clear_log(_confirmer(yes)):
        typer.echo("Interval log cleared.")
    else:
        typer.echo("Aborted.")


@table_app.command("snapshot")
def table_snapshot(ctx: typer.Context) -> None:
    """Copy the current totals into a new summary row."""
    session = _open_session(ctx)
    row = session.snapshot()
    typer.echo(
        f"Row #{row.sequence_number}: {format_time(row.total_duration)}, "
        f"{row.total_quantity} over {row.batch_count} batch(es), "
        f"avg {row.average_per_batch} per batch, {row.average_per_unit} per unit."
    )


@table_app.command("annotate")
def table_annotate(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Zero-based position of the row."),
    value: str = typer.Argument(..., help="Free-form note for the row."),
) -> None:
    """Set the note on a summary row."""
    session = _open_session(ctx)
    if session.annotate(index, value):
        typer.echo(f"Updated row {index}.")
    else:
        typer.echo(f"No row at position {index}.")


@table_app.command("delete")
def table_delete(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Zero-based position of the row."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete one summary row."""
    session = _open_session(ctx)
    if session.delete_row(index, _confirmer(yes)):
        typer.echo(f"Deleted row {index}.")
    else:
        typer.echo("Nothing deleted.")


@table_app.command("clear")
def table_clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete every summary row."""
    session = _open_session(ctx)
    if session.clear_table(_confirmer(yes)):
        typer.echo("Summary table cleared.")
    else:
        typer.echo("Aborted.")


@app.command()
def web(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
) -> None:
    """Serve a live session with a running clock over HTTP."""
    from .server_runner import run_server

    run_server(
        host=host,
        port=port,
        store_path=ctx.obj["db_path"],
        settings=ctx.obj["settings"],
    )
