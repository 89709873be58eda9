"""Configuration models and helpers for the working time report."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time, timedelta

DEFAULT_ROUNDING = timedelta(minutes=5)
DEFAULT_WORK_START = time(6, 0)
DEFAULT_WORK_END = time(18, 0)
DEFAULT_WORK_IDLE = timedelta(hours=4)
DEFAULT_AFTER_IDLE = timedelta(minutes=15)

_UNIT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([hms])", re.IGNORECASE)
_UNITS = {"h": "hours", "m": "minutes", "s": "seconds"}
_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_duration(value: str) -> timedelta:
    """Parse ``"5m"``, ``"1h30m"``, ``"90s"`` or ``"HH:MM[:SS]"``."""
    text = value.strip()
    clock = _CLOCK_PATTERN.match(text)
    if clock:
        hours, minutes, seconds = clock.groups()
        return timedelta(hours=int(hours), minutes=int(minutes), seconds=int(seconds or 0))

    parts = _UNIT_PATTERN.findall(text)
    if not parts or _UNIT_PATTERN.sub("", text).strip():
        raise ValueError(f"Invalid duration: {value!r}")
    total = timedelta()
    for amount, unit in parts:
        total += timedelta(**{_UNITS[unit.lower()]: float(amount)})
    return total


def parse_time_of_day(value: str) -> time:
    """Parse ``"HH:MM"`` or ``"HH:MM:SS"`` into a :class:`time`."""
    match = _CLOCK_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    try:
        return time(hours, minutes, seconds)
    except ValueError as exc:
        raise ValueError(f"Invalid time of day: {value!r}") from exc


@dataclass(slots=True)
class ReportSettings:
    """Tunables for turning session events into working days."""

    rounding: timedelta = DEFAULT_ROUNDING
    work_start: time = DEFAULT_WORK_START
    work_end: time = DEFAULT_WORK_END
    work_idle: timedelta = DEFAULT_WORK_IDLE
    after_idle: timedelta = DEFAULT_AFTER_IDLE

    def __post_init__(self) -> None:
        if self.rounding <= timedelta(0):
            raise ValueError("rounding must be positive")
        if self.work_idle < timedelta(0) or self.after_idle < timedelta(0):
            raise ValueError("idle timeouts cannot be negative")

    @classmethod
    def from_options(
        cls,
        rounding: str,
        work_start: str,
        work_end: str,
        work_idle: str,
        after_idle: str,
    ) -> "ReportSettings":
        return cls(
            rounding=parse_duration(rounding),
            work_start=parse_time_of_day(work_start),
            work_end=parse_time_of_day(work_end),
            work_idle=parse_duration(work_idle),
            after_idle=parse_duration(after_idle),
        )
