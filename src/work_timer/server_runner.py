"""Launch the JSON API over an exported session event log."""

from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from .config import ReportSettings
from .eventlog import read_events
from .models import SessionEvent
from .paths import get_events_path
from .webapp import create_app

logger = logging.getLogger(__name__)

BROWSER_DELAY_SECONDS = 1.0


def describe_settings(settings: ReportSettings) -> str:
    return (
        f"rounding={settings.rounding} "
        f"working hours={settings.work_start:%H:%M}-{settings.work_end:%H:%M} "
        f"work idle={settings.work_idle} after-hours idle={settings.after_idle}"
    )


def describe_events(events: Sequence[SessionEvent]) -> str:
    if not events:
        return "no events"
    first, last = events[0].timestamp, events[-1].timestamp
    return f"{len(events)} events from {first:%Y-%m-%d} to {last:%Y-%m-%d}"


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    events_path: Optional[Path] = None,
    settings: Optional[ReportSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve working days for ``events_path``.

    The log is read once before the server starts, so a missing or
    malformed export fails fast with :class:`EventSourceError` instead of
    on the first request. Requests re-read the file and see later exports.
    """
    resolved_path = Path(events_path or get_events_path())
    resolved_settings = settings or ReportSettings()

    events = read_events(resolved_path)
    logger.info("Serving %s (%s)", resolved_path, describe_events(events))
    logger.info("Report settings: %s", describe_settings(resolved_settings))

    app = create_app(events_path=resolved_path, settings=resolved_settings)

    if open_browser:
        timer = threading.Timer(
            BROWSER_DELAY_SECONDS, _open_docs, args=(f"http://{host}:{port}/docs",)
        )
        timer.daemon = True
        timer.start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _open_docs(url: str) -> None:
    try:
        webbrowser.open(url)
    except webbrowser.Error:
        logger.exception("Failed to launch browser for %s", url)
