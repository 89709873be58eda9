"""Console tables for working day reports."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Sequence

from .models import WorkingDay

_SUMMARY_ROW = "│ {0:<10} │ {1:>11} │ {2:>11} │ {3:>8} │"
_DAY_ROW = "│ {0:>10} │ {1:>8} │ {2:>8} │ {3:>8} │"


class DayTableRenderer:
    """Render working days as box-drawn tables on stdout."""

    def __init__(self, summary: bool = False, verbose: bool = False) -> None:
        self.summary = summary
        self.verbose = verbose

    def render(self, days: Iterable[WorkingDay]) -> None:
        days = list(days)
        if not days:
            print("No activity recorded.")
            return
        if self.summary:
            self.render_summary(days)
            return
        for day in days:
            self.render_day(day)

    def render_summary(self, days: Sequence[WorkingDay]) -> None:
        print("┌────────────┬─────────────┬─────────────┬──────────┐")
        print(_SUMMARY_ROW.format("Day", "First login", "Last logout", "Duration"))
        print("├────────────┼─────────────┼─────────────┼──────────┤")
        for day in days:
            print(
                _SUMMARY_ROW.format(
                    day.day.isoformat(),
                    format_clock(day.start),
                    format_clock(day.end),
                    format_timedelta(day.duration),
                )
            )
        print("└────────────┴─────────────┴─────────────┴──────────┘")

    def render_day(self, day: WorkingDay) -> None:
        print("┌────────────┬──────────┬──────────┬──────────┐")
        print(_DAY_ROW.format(day.day.isoformat(), "Login", "Logout", "Duration"))
        if self.verbose:
            for index, merged in enumerate(day.merged_sessions, start=1):
                print("├────────────┼──────────┼──────────┼──────────┤")
                if len(merged.sessions) > 1:
                    for part, session in enumerate(merged.sessions, start=1):
                        print(_row(f"{index}.{part}", session.start, session.end, session.duration))
                print(_row(f"Sum {index}", merged.start, merged.end, merged.duration))
            print("╞════════════╪══════════╪══════════╪══════════╡")
        else:
            print("├────────────┼──────────┼──────────┼──────────┤")
            for index, merged in enumerate(day.merged_sessions, start=1):
                print(_row(str(index), merged.start, merged.end, merged.duration))
            print("├────────────┼──────────┼──────────┼──────────┤")
        print(_row("Sum", day.start, day.end, day.duration))
        print("└────────────┴──────────┴──────────┴──────────┘")
        print()


def _row(label: str, start: datetime, end: datetime, duration: timedelta) -> str:
    return _DAY_ROW.format(label, format_clock(start), format_clock(end), format_timedelta(duration))


def format_clock(value: datetime) -> str:
    return value.strftime("%H:%M:%S")


def format_timedelta(value: timedelta) -> str:
    return format_duration(value.total_seconds())


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
