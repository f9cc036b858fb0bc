"""Command-line interface for the live salary tracker."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

import typer

from .formatting import parse_time_string, time_range
from .normalization import parse_day_list, parse_salary_text
from .paths import get_db_path, get_log_path
from .server_runner import run_dashboard
from .store import SalaryStore

app = typer.Typer(help="See how much of this month's salary you have earned so far.")

DB_OPTION = typer.Option(
    None,
    "--db",
    path_type=Path,
    help="Location of the settings SQLite database.",
)


@app.callback(no_args_is_help=True)
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_file: bool = typer.Option(
        False, "--log-file", help="Write logs to the application data directory."
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        filename=str(get_log_path()) if log_file else None,
    )


def _open_store(db_path: Optional[Path]) -> SalaryStore:
    return SalaryStore(db_path or get_db_path())


@app.command()
def status(db_path: Optional[Path] = DB_OPTION) -> None:
    """Print today's earnings and the month's configuration."""
    from .reporting import StatusPrinter

    with _open_store(db_path) as store:
        StatusPrinter(store).print_status()


@app.command()
def calendar(db_path: Optional[Path] = DB_OPTION) -> None:
    """Show this month's calendar with non-work days in brackets."""
    from .reporting import StatusPrinter

    with _open_store(db_path) as store:
        StatusPrinter(store).print_calendar()


@app.command()
def watch(db_path: Optional[Path] = DB_OPTION) -> None:
    """Keep printing the live earnings title until interrupted."""
    stop_event = threading.Event()
    with _open_store(db_path) as store:
        store.subscribe(lambda s: typer.echo(f"\r{s.menu_bar_title:<16}", nl=False))
        typer.echo(f"\r{store.menu_bar_title:<16}", nl=False)
        store.start()
        try:
            while not stop_event.wait(1.0):
                pass
        except KeyboardInterrupt:
            typer.echo("")
            logging.getLogger(__name__).info("Watch interrupted.")


@app.command("set-salary")
def set_salary(
    amount: str = typer.Argument(..., help="Monthly salary, e.g. 22000 or 22,000.00."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Set this month's salary."""
    value = parse_salary_text(amount)
    if value is None:
        raise typer.BadParameter(f"{amount!r} is not a non-negative number", param_hint="AMOUNT")
    with _open_store(db_path) as store:
        store.set_month_salary(value)
        typer.echo(f"Monthly salary for {store.month_key} set. Now: {store.menu_bar_title}")


@app.command("set-non-work-days")
def set_non_work_days(
    days: str = typer.Argument(
        ..., help='Days of month off work, e.g. "6,7,13-14". Use "" for none.'
    ),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Set this month's non-work days."""
    try:
        parsed = parse_day_list(days)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="DAYS") from exc
    with _open_store(db_path) as store:
        store.set_non_work_days(parsed)
        listed = ", ".join(str(day) for day in sorted(parsed)) or "none"
        typer.echo(f"Non-work days for {store.month_key}: {listed}")


@app.command("toggle-day")
def toggle_day(
    day: int = typer.Argument(..., help="Day of month to mark or unmark as a non-work day."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Flip a single day in or out of this month's non-work days."""
    with _open_store(db_path) as store:
        try:
            off = store.toggle_non_work_day(day)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="DAY") from exc
        typer.echo(f"Day {day} is now a {'non-work' if off else 'work'} day in {store.month_key}")


@app.command("set-work-time")
def set_work_time(
    start: str = typer.Argument(..., help="Work start as HH:MM."),
    end: str = typer.Argument(..., help="Work end as HH:MM."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Set the daily working window."""
    try:
        start_seconds = parse_time_string(start)
        end_seconds = parse_time_string(end)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    with _open_store(db_path) as store:
        store.start_seconds = start_seconds
        store.end_seconds = end_seconds
        typer.echo(f"Work time: {time_range(store.start_seconds, store.end_seconds)}")


@app.command("set-refresh")
def set_refresh(
    seconds: float = typer.Argument(..., help="Refresh interval in seconds (minimum 0.1)."),
    db_path: Optional[Path] = DB_OPTION,
) -> None:
    """Set how often the live status refreshes."""
    with _open_store(db_path) as store:
        try:
            store.refresh_interval = seconds
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="SECONDS") from exc
        typer.echo(f"Refresh interval: {store.effective_refresh_interval:.1f} s")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    db_path: Optional[Path] = DB_OPTION,
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
) -> None:
    """Start the local dashboard with a live-refreshing store."""
    run_dashboard(
        host=host,
        port=port,
        db_path=db_path or get_db_path(),
        open_browser=open_browser,
    )
