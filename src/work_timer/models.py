"""Domain models for session events and working time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

from .rounding import is_weekend


class EventKind(str, Enum):
    """State change reported by the event source."""

    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"


class InvalidEventKind(ValueError):
    """Raised when an event carries a kind outside of :class:`EventKind`."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unhandled event kind {value!r}")
        self.value = value


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """A single activate/deactivate transition."""

    timestamp: datetime
    kind: EventKind


@dataclass(frozen=True, slots=True)
class Session:
    """A closed, rounded interval of continuous activity."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def day(self) -> date:
        return self.start.date()

    def is_working_hours(self, work_start: time, work_end: time) -> bool:
        return (
            self.start.time() <= work_end
            and self.end.time() >= work_start
            and not is_weekend(self.start)
        )


@dataclass(frozen=True, slots=True)
class MergedSession:
    """One or more sessions of a day separated by short idle gaps."""

    sessions: tuple[Session, ...]

    def __post_init__(self) -> None:
        if not self.sessions:
            raise ValueError("A merged session needs at least one session")

    @property
    def start(self) -> datetime:
        return self.sessions[0].start

    @property
    def end(self) -> datetime:
        return self.sessions[-1].end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class WorkingDay:
    """All merged sessions recorded on one calendar day."""

    day: date
    merged_sessions: tuple[MergedSession, ...]

    @property
    def duration(self) -> timedelta:
        return sum((merged.duration for merged in self.merged_sessions), timedelta())

    @property
    def start(self) -> datetime:
        return self.merged_sessions[0].start

    @property
    def end(self) -> datetime:
        return self.merged_sessions[-1].end

    @property
    def sessions(self) -> list[Session]:
        """Flatten the day back into its raw sessions."""
        return [session for merged in self.merged_sessions for session in merged.sessions]
