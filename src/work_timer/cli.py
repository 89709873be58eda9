"""Command-line interface for the working time report."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import ReportSettings
from .eventlog import EventSourceError, read_events
from .models import InvalidEventKind
from .paths import get_events_path
from .reporting import DayTableRenderer
from .server_runner import run_dashboard
from .working_days import build_working_days

logger = logging.getLogger(__name__)

app = typer.Typer(help="Session length calculator.")

ROUNDING_HELP = "How much to round start and end times."
WORK_START_HELP = "When the working hours start."
WORK_END_HELP = "When the working hours end."
WORK_IDLE_HELP = "Idle time before starting a new session within the working hours."
AFTER_IDLE_HELP = "Idle time before starting a new session outside the working hours."


@app.callback(no_args_is_help=True)
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _load_settings(
    rounding: str, work_start: str, work_end: str, work_idle: str, after_idle: str
) -> ReportSettings:
    try:
        return ReportSettings.from_options(
            rounding=rounding,
            work_start=work_start,
            work_end=work_end,
            work_idle=work_idle,
            after_idle=after_idle,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def report(
    events_path: Optional[Path] = typer.Option(
        None,
        "--events",
        path_type=Path,
        help="Exported session event log (CSV).",
    ),
    rounding: str = typer.Option("5m", "--rounding", "-r", help=ROUNDING_HELP),
    work_start: str = typer.Option(
        "06:00", "--work-start", "--ws", "-w", help=WORK_START_HELP
    ),
    work_end: str = typer.Option("18:00", "--work-end", "--we", "-e", help=WORK_END_HELP),
    work_idle: str = typer.Option(
        "4h", "--work-idle", "--wi", "-i", help=WORK_IDLE_HELP
    ),
    after_idle: str = typer.Option("15m", "--non-work-idle", "-n", help=AFTER_IDLE_HELP),
    summary: bool = typer.Option(
        False, "--summary", "-s", help="Only show the calculated times for each day."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show every session with a marker for which is merged."
    ),
    wait: bool = typer.Option(
        False, "--wait", help="Wait for a keypress before exiting."
    ),
) -> None:
    """Print the working hours reconstructed from the event log."""
    settings = _load_settings(rounding, work_start, work_end, work_idle, after_idle)
    source = events_path or get_events_path()
    try:
        events = read_events(source)
        days = list(build_working_days(events, settings))
    except (EventSourceError, InvalidEventKind) as exc:
        logger.debug("Failed to build report from %s", source, exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    DayTableRenderer(summary=summary, verbose=verbose).render(days)

    if wait:
        typer.pause("Press any key to exit...")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    events_path: Optional[Path] = typer.Option(
        None, "--events", path_type=Path, help="Exported session event log (CSV)."
    ),
    rounding: str = typer.Option("5m", "--rounding", "-r", help=ROUNDING_HELP),
    work_start: str = typer.Option(
        "06:00", "--work-start", "--ws", "-w", help=WORK_START_HELP
    ),
    work_end: str = typer.Option("18:00", "--work-end", "--we", "-e", help=WORK_END_HELP),
    work_idle: str = typer.Option(
        "4h", "--work-idle", "--wi", "-i", help=WORK_IDLE_HELP
    ),
    after_idle: str = typer.Option("15m", "--non-work-idle", "-n", help=AFTER_IDLE_HELP),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the API docs in your default browser.",
    ),
) -> None:
    """Serve working days as JSON."""
    settings = _load_settings(rounding, work_start, work_end, work_idle, after_idle)
    source = events_path or get_events_path()
    try:
        run_dashboard(
            host=host,
            port=port,
            events_path=source,
            settings=settings,
            open_browser=open_browser,
        )
    except (EventSourceError, InvalidEventKind) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
