# ==============================================================================
# Tests for server_runner.py
# ==============================================================================
"""
Tests that run_dashboard reads the event log before starting uvicorn and
passes the resolved path and settings on to the app.
"""

import logging
from datetime import timedelta
from unittest.mock import patch

import pytest

from conftest import activate, deactivate
from work_timer.config import ReportSettings
from work_timer.eventlog import EventSourceError
from work_timer.server_runner import describe_events, describe_settings, run_dashboard


class TestDescribe:
    def test_settings(self):
        text = describe_settings(ReportSettings(work_idle=timedelta(hours=2)))
        assert "working hours=06:00-18:00" in text
        assert "work idle=2:00:00" in text
        assert "after-hours idle=0:15:00" in text

    def test_events(self):
        events = [activate("2024-03-03T10:00"), deactivate("2024-03-04T17:00")]
        assert describe_events(events) == "2 events from 2024-03-03 to 2024-03-04"

    def test_no_events(self):
        assert describe_events([]) == "no events"


class TestRunDashboard:
    def test_serves_app_for_event_log(self, events_csv, caplog):
        settings = ReportSettings(rounding=timedelta(minutes=15))
        with patch("work_timer.server_runner.uvicorn.run") as run:
            with caplog.at_level(logging.INFO, logger="work_timer.server_runner"):
                run_dashboard(
                    port=9000, events_path=events_csv, settings=settings, open_browser=False
                )
        run.assert_called_once()
        served = run.call_args.args[0]
        assert served.state.events_path == events_csv
        assert served.state.settings is settings
        assert run.call_args.kwargs["port"] == 9000
        assert "6 events from 2024-03-03 to 2024-03-04" in caplog.text

    def test_missing_event_log_fails_before_serving(self, tmp_path):
        with patch("work_timer.server_runner.uvicorn.run") as run:
            with pytest.raises(EventSourceError):
                run_dashboard(events_path=tmp_path / "missing.csv", open_browser=False)
        run.assert_not_called()
