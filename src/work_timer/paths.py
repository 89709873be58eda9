"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "WorkTimer"
APP_AUTHOR = "WorkTimer"


def get_data_dir() -> Path:
    """Return the base directory for exported logs."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_events_path() -> Path:
    return get_data_dir() / "session_events.csv"
