# ==============================================================================
# Tests for the JSON API
# ==============================================================================
"""
Tests for the FastAPI endpoints that expose rounded sessions and working
days, including date range filtering and error responses.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from work_timer.config import ReportSettings
from work_timer.webapp import create_app


@pytest.fixture()
def client(events_csv):
    app = create_app(events_path=events_csv, settings=ReportSettings())
    return TestClient(app)


class TestStatus:
    def test_reports_settings(self, client, events_csv):
        response = client.get("/api/status")
        assert response.status_code == 200
        payload = response.json()
        assert payload["events_path"] == str(events_csv)
        assert payload["events_available"] is True
        assert payload["rounding_minutes"] == 5.0
        assert payload["work_start"] == "06:00:00"
        assert payload["after_idle_minutes"] == 15.0


class TestWorkingDays:
    def test_merged_sessions(self, client):
        response = client.get("/api/working-days")
        assert response.status_code == 200
        (day,) = response.json()
        assert day["day"] == "2024-03-04"
        assert day["duration_seconds"] == 9 * 3600
        (merged,) = day["merged_sessions"]
        assert merged["start"] == "2024-03-04T08:00:00"
        assert merged["end"] == "2024-03-04T17:00:00"
        assert merged["sessions"] is None

    def test_verbose_includes_sessions(self, client):
        response = client.get("/api/working-days", params={"verbose": "true"})
        (day,) = response.json()
        sessions = day["merged_sessions"][0]["sessions"]
        assert [s["duration_seconds"] for s in sessions] == [4 * 3600, 4 * 3600 + 50 * 60]

    def test_range_filter(self, client):
        response = client.get("/api/working-days", params={"start": "2024-03-05"})
        assert response.status_code == 200
        assert response.json() == []

    def test_inverted_range(self, client):
        response = client.get(
            "/api/working-days", params={"start": "2024-03-05", "end": "2024-03-04"}
        )
        assert response.status_code == 400

    def test_bad_date(self, client):
        response = client.get("/api/working-days", params={"start": "04/03/2024"})
        assert response.status_code == 400

    def test_custom_settings(self, events_csv):
        settings = ReportSettings(work_idle=timedelta(minutes=5))
        client = TestClient(create_app(events_path=events_csv, settings=settings))
        (day,) = client.get("/api/working-days").json()
        assert len(day["merged_sessions"]) == 2


class TestSessions:
    def test_flat_sessions(self, client):
        response = client.get("/api/sessions", params={"end": "2024-03-04"})
        assert response.status_code == 200
        assert [(s["start"], s["end"]) for s in response.json()] == [
            ("2024-03-04T08:00:00", "2024-03-04T12:00:00"),
            ("2024-03-04T12:10:00", "2024-03-04T17:00:00"),
        ]


class TestErrors:
    def test_missing_events_file(self, tmp_path):
        client = TestClient(create_app(events_path=tmp_path / "missing.csv"))
        response = client.get("/api/working-days")
        assert response.status_code == 422
        assert "Cannot read" in response.json()["detail"]

    def test_invalid_kind(self, tmp_path):
        path = tmp_path / "events.csv"
        path.write_text("timestamp,kind\n2024-03-04T08:00:00,suspend\n", encoding="utf-8")
        client = TestClient(create_app(events_path=path))
        response = client.get("/api/sessions")
        assert response.status_code == 422
        assert "suspend" in response.json()["detail"]

    def test_undecodable_events_file(self, tmp_path):
        path = tmp_path / "broken.csv"
        path.write_bytes(b"timestamp,kind\n2024-03-04T08:00:00,activ\xffate\n")
        client = TestClient(create_app(events_path=path))
        response = client.get("/api/working-days")
        assert response.status_code == 422
        assert "Cannot read" in response.json()["detail"]
