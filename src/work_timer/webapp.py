"""FastAPI application that exposes working days as JSON."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .config import ReportSettings
from .eventlog import EventSourceError, read_events
from .models import InvalidEventKind, MergedSession, Session, SessionEvent, WorkingDay
from .paths import get_events_path
from .sessions import to_sessions
from .working_days import build_working_days

logger = logging.getLogger(__name__)


class SessionPayload(BaseModel):
    start: datetime
    end: datetime
    duration_seconds: float

    model_config = ConfigDict(extra="forbid")


class MergedSessionPayload(BaseModel):
    start: datetime
    end: datetime
    duration_seconds: float
    sessions: Optional[list[SessionPayload]] = None

    model_config = ConfigDict(extra="forbid")


class WorkingDayPayload(BaseModel):
    day: date
    duration_seconds: float
    merged_sessions: list[MergedSessionPayload]

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    events_path: Optional[Path] = None,
    settings: Optional[ReportSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_events_path = Path(events_path or get_events_path())
    resolved_settings = settings or ReportSettings()

    app = FastAPI(title="Work Timer", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.events_path = resolved_events_path
    app.state.settings = resolved_settings

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        path: Path = request.app.state.events_path
        current: ReportSettings = request.app.state.settings
        return {
            "events_path": str(path),
            "events_available": path.exists(),
            "rounding_minutes": current.rounding.total_seconds() / 60.0,
            "work_start": current.work_start.isoformat(),
            "work_end": current.work_end.isoformat(),
            "work_idle_minutes": current.work_idle.total_seconds() / 60.0,
            "after_idle_minutes": current.after_idle.total_seconds() / 60.0,
        }

    @app.get("/api/working-days", response_model=list[WorkingDayPayload])
    def working_days(
        request: Request,
        start: Optional[str] = Query(
            default=None,
            description="First day in YYYY-MM-DD format (inclusive).",
        ),
        end: Optional[str] = Query(
            default=None,
            description="Last day in YYYY-MM-DD format (inclusive).",
        ),
        verbose: bool = Query(
            default=False,
            description="Include the sessions that make up each merged session.",
        ),
    ) -> list[WorkingDayPayload]:
        start_day, end_day = _parse_range(start, end)
        events = _load_events(request.app.state.events_path)
        days = [
            day
            for day in build_working_days(events, request.app.state.settings)
            if _in_range(day.day, start_day, end_day)
        ]
        return [_day_payload(day, verbose) for day in days]

    @app.get("/api/sessions", response_model=list[SessionPayload])
    def sessions(
        request: Request,
        start: Optional[str] = Query(default=None, description="First day (inclusive)."),
        end: Optional[str] = Query(default=None, description="Last day (inclusive)."),
    ) -> list[SessionPayload]:
        start_day, end_day = _parse_range(start, end)
        events = _load_events(request.app.state.events_path)
        rounding = request.app.state.settings.rounding
        return [
            _session_payload(session)
            for session in to_sessions(events, rounding)
            if _in_range(session.day, start_day, end_day)
        ]

    return app


def _load_events(path: Path) -> list[SessionEvent]:
    try:
        return read_events(path)
    except (EventSourceError, InvalidEventKind) as exc:
        logger.warning("Cannot load events from %s: %s", path, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc


def _parse_range(start: Optional[str], end: Optional[str]) -> tuple[Optional[date], Optional[date]]:
    start_day = _parse_date(start)
    end_day = _parse_date(end)
    if start_day and end_day and end_day < start_day:
        raise HTTPException(
            status_code=400, detail="end date must be on or after start date"
        )
    return start_day, end_day


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


def _session_payload(session: Session) -> SessionPayload:
    return SessionPayload(
        start=session.start,
        end=session.end,
        duration_seconds=session.duration.total_seconds(),
    )


def _merged_payload(merged: MergedSession, verbose: bool) -> MergedSessionPayload:
    return MergedSessionPayload(
        start=merged.start,
        end=merged.end,
        duration_seconds=merged.duration.total_seconds(),
        sessions=[_session_payload(s) for s in merged.sessions] if verbose else None,
    )


def _day_payload(day: WorkingDay, verbose: bool) -> WorkingDayPayload:
    return WorkingDayPayload(
        day=day.day,
        duration_seconds=day.duration.total_seconds(),
        merged_sessions=[_merged_payload(merged, verbose) for merged in day.merged_sessions],
    )
