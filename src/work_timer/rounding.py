"""Helpers to snap timestamps onto a fixed grid."""

from __future__ import annotations

from datetime import date, datetime, timedelta


def _truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def _overflow(value: datetime, interval: timedelta) -> timedelta:
    if interval <= timedelta(0):
        raise ValueError(f"Rounding interval must be positive, got {interval}")
    # Offsets are measured from datetime.min so the grid does not depend on tzinfo.
    return (value.replace(tzinfo=None) - datetime.min) % interval


def floor_time(value: datetime, interval: timedelta) -> datetime:
    """Round ``value`` down to the closest multiple of ``interval``."""
    truncated = _truncate_to_minute(value)
    return truncated - _overflow(truncated, interval)


def ceil_time(value: datetime, interval: timedelta) -> datetime:
    """Round ``value`` up to the closest multiple of ``interval``.

    Seconds are dropped before rounding, so 09:04:10 with a five minute
    interval becomes 09:05 while 09:05:59 stays at 09:05.
    """
    truncated = _truncate_to_minute(value)
    overflow = _overflow(truncated, interval)
    if not overflow:
        return truncated
    return truncated + (interval - overflow)


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5
