"""Reduce raw activate/deactivate events into rounded sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Iterator, Optional

from .models import EventKind, InvalidEventKind, Session, SessionEvent
from .rounding import ceil_time, floor_time

logger = logging.getLogger(__name__)


class ActivateOutcome(Enum):
    """What an Activate event does to the buffered session."""

    START = "start"
    FUSE = "fuse"
    EMIT = "emit"


@dataclass(frozen=True, slots=True)
class ReducerState:
    first_day: Optional[date] = None
    pending_start: Optional[datetime] = None
    pending_end: Optional[datetime] = None


def classify_activate(state: ReducerState, rounded_start: datetime) -> ActivateOutcome:
    if state.pending_start is None or state.pending_end is None:
        return ActivateOutcome.START
    if state.pending_end >= rounded_start:
        return ActivateOutcome.FUSE
    return ActivateOutcome.EMIT


def to_sessions(
    events: Iterable[SessionEvent],
    rounding: timedelta,
    now: Optional[datetime] = None,
) -> Iterator[Session]:
    """Yield the sessions described by an ordered event stream.

    Events from the first observed day are skipped because the log may
    start in the middle of that day. When rounding makes a new session
    start at or before the end of the buffered one, both are fused into a
    single session. A session still open at the end of the stream is
    closed at ``now`` (defaults to the current time).
    """
    state = ReducerState()
    skipped = 0
    for event in events:
        if not isinstance(event.kind, EventKind):
            raise InvalidEventKind(event.kind)

        event_day = event.timestamp.date()
        if state.first_day is None:
            state = replace(state, first_day=event_day)
        if event_day == state.first_day:
            skipped += 1
            continue
        if event.kind is EventKind.DEACTIVATE and state.pending_start is None:
            continue

        if event.kind is EventKind.DEACTIVATE:
            state = replace(state, pending_end=ceil_time(event.timestamp, rounding))
            continue

        rounded = floor_time(event.timestamp, rounding)
        outcome = classify_activate(state, rounded)
        if outcome is ActivateOutcome.FUSE:
            logger.debug(
                "Fusing session started %s with activation at %s",
                state.pending_start,
                event.timestamp,
            )
            state = replace(state, pending_end=None)
        elif outcome is ActivateOutcome.EMIT:
            yield Session(state.pending_start, state.pending_end)
            state = replace(state, pending_start=rounded, pending_end=None)
        else:
            state = replace(state, pending_start=rounded)

    if skipped:
        logger.debug("Skipped %d events from the first day %s", skipped, state.first_day)

    if state.pending_start is None:
        return
    if state.pending_end is not None:
        yield Session(state.pending_start, state.pending_end)
        return

    current = now if now is not None else datetime.now(state.pending_start.tzinfo)
    yield Session(state.pending_start, ceil_time(current, rounding))
