"""Group sessions into merged blocks per calendar day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, Optional

from .config import (
    DEFAULT_AFTER_IDLE,
    DEFAULT_WORK_END,
    DEFAULT_WORK_IDLE,
    DEFAULT_WORK_START,
    ReportSettings,
)
from .models import MergedSession, Session, SessionEvent, WorkingDay
from .sessions import to_sessions


@dataclass(frozen=True, slots=True)
class OpenDay:
    """Blocks collected so far for the day being aggregated."""

    day: date
    blocks: tuple[tuple[Session, ...], ...]

    @classmethod
    def starting_with(cls, session: Session) -> "OpenDay":
        return cls(day=session.day, blocks=((session,),))

    def append(self, session: Session, idle_timeout: timedelta) -> "OpenDay":
        last_block = self.blocks[-1]
        if session.start - last_block[-1].end > idle_timeout:
            return OpenDay(self.day, self.blocks + ((session,),))
        return OpenDay(self.day, self.blocks[:-1] + (last_block + (session,),))

    def close(self) -> WorkingDay:
        return WorkingDay(
            day=self.day,
            merged_sessions=tuple(MergedSession(block) for block in self.blocks),
        )


def calculate_working_days(
    sessions: Iterable[Session],
    work_start: time = DEFAULT_WORK_START,
    work_end: time = DEFAULT_WORK_END,
    work_idle: timedelta = DEFAULT_WORK_IDLE,
    after_idle: timedelta = DEFAULT_AFTER_IDLE,
) -> Iterator[WorkingDay]:
    """Yield one :class:`WorkingDay` per calendar day in ``sessions``.

    The idle timeout applied to the gap before a session depends on that
    session: ``work_idle`` when it touches the working hours on a weekday,
    ``after_idle`` otherwise. Only gaps strictly longer than the timeout
    split a block.
    """
    current: OpenDay | None = None
    for session in sessions:
        if current is None or session.day != current.day:
            if current is not None:
                yield current.close()
            current = OpenDay.starting_with(session)
            continue

        idle_timeout = work_idle if session.is_working_hours(work_start, work_end) else after_idle
        current = current.append(session, idle_timeout)

    if current is not None:
        yield current.close()


def build_working_days(
    events: Iterable[SessionEvent],
    settings: ReportSettings,
    now: Optional[datetime] = None,
) -> Iterator[WorkingDay]:
    """Run both reduction stages over ``events`` with the given settings."""
    sessions = to_sessions(events, settings.rounding, now=now)
    return calculate_working_days(
        sessions,
        work_start=settings.work_start,
        work_end=settings.work_end,
        work_idle=settings.work_idle,
        after_idle=settings.after_idle,
    )
