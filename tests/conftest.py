# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- Builders for activate/deactivate event streams
- A CSV event log written to a temporary directory
"""

from datetime import datetime

import pytest

from work_timer.models import EventKind, SessionEvent

# Sunday before the week the tests report on; its events are always dropped.
FIRST_DAY_EVENT = SessionEvent(datetime(2024, 3, 3, 10, 0), EventKind.ACTIVATE)


def activate(value: str) -> SessionEvent:
    return SessionEvent(datetime.fromisoformat(value), EventKind.ACTIVATE)


def deactivate(value: str) -> SessionEvent:
    return SessionEvent(datetime.fromisoformat(value), EventKind.DEACTIVATE)


def with_first_day(*events: SessionEvent) -> list[SessionEvent]:
    """Prefix events with one from a discarded first day."""
    return [FIRST_DAY_EVENT, *events]


@pytest.fixture()
def events_csv(tmp_path):
    """Plain-layout event log covering the 2024-03-04 end-to-end scenario."""
    path = tmp_path / "session_events.csv"
    path.write_text(
        "timestamp,kind\n"
        "2024-03-03T10:00:00,activate\n"
        "2024-03-03T18:00:00,deactivate\n"
        "2024-03-04T08:00:00,activate\n"
        "2024-03-04T12:00:00,deactivate\n"
        "2024-03-04T12:10:00,activate\n"
        "2024-03-04T17:00:00,deactivate\n",
        encoding="utf-8",
    )
    return path
