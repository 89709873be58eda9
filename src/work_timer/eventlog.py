"""Load session events from an exported security audit log."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Optional

from .models import EventKind, InvalidEventKind, SessionEvent

logger = logging.getLogger(__name__)

# Windows security audit event ids.
EVENT_ID_KINDS: dict[int, EventKind] = {
    4624: EventKind.ACTIVATE,  # logon
    4778: EventKind.ACTIVATE,  # remote session connected
    4801: EventKind.ACTIVATE,  # workstation unlocked
    4647: EventKind.DEACTIVATE,  # logoff
    4779: EventKind.DEACTIVATE,  # remote session disconnected
    4800: EventKind.DEACTIVATE,  # workstation locked
}

_SCHEDULED_TASK_LOGON_TYPE = "4"
_TIMESTAMP_FORMATS = ("%m/%d/%Y %I:%M:%S %p", "%d.%m.%Y %H:%M:%S")


class EventSourceError(ValueError):
    """Raised when an exported log cannot be interpreted."""


def parse_kind(value: str) -> EventKind:
    try:
        return EventKind(value.strip().lower())
    except ValueError as exc:
        raise InvalidEventKind(value) from exc


def kind_for_event_id(event_id: int) -> EventKind:
    try:
        return EVENT_ID_KINDS[event_id]
    except KeyError as exc:
        raise InvalidEventKind(event_id) from exc


def parse_timestamp(value: str) -> datetime:
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized timestamp {value!r}")


def _row_to_event(row: Mapping[str, Optional[str]]) -> Optional[SessionEvent]:
    if "Id" in row:
        raw_id = (row["Id"] or "").strip()
        try:
            event_id = int(raw_id)
        except ValueError as exc:
            raise InvalidEventKind(raw_id) from exc
        if event_id == 4624 and (row.get("LogonType") or "").strip() == _SCHEDULED_TASK_LOGON_TYPE:
            return None
        return SessionEvent(parse_timestamp(row["TimeCreated"] or ""), kind_for_event_id(event_id))
    return SessionEvent(parse_timestamp(row["timestamp"] or ""), parse_kind(row["kind"] or ""))


def parse_rows(rows: Iterable[Mapping[str, Optional[str]]]) -> list[SessionEvent]:
    """Convert CSV rows into events ordered by timestamp.

    Rows are either a security log export (``TimeCreated``, ``Id`` and an
    optional ``LogonType``) or the plain ``timestamp``/``kind`` layout.
    """
    events: list[SessionEvent] = []
    for line_number, row in enumerate(rows, start=2):
        try:
            event = _row_to_event(row)
        except KeyError as exc:
            raise EventSourceError(f"line {line_number}: missing column {exc.args[0]!r}") from exc
        except InvalidEventKind:
            raise
        except ValueError as exc:
            raise EventSourceError(f"line {line_number}: {exc}") from exc
        if event is not None:
            events.append(event)
    try:
        events.sort(key=lambda event: event.timestamp)
    except TypeError as exc:
        raise EventSourceError(
            "timestamps mix values with and without a UTC offset"
        ) from exc
    return events


def collapse_repeats(events: Iterable[SessionEvent]) -> Iterator[SessionEvent]:
    """Drop events that repeat the kind of the event before them."""
    last_kind: Optional[EventKind] = None
    for event in events:
        if event.kind != last_kind:
            yield event
        last_kind = event.kind


def read_events(path: Path) -> list[SessionEvent]:
    """Read an exported log file into an ordered, de-duplicated event list."""
    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8-sig") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames:
                raise EventSourceError(f"{path} has no header row")
            parsed = parse_rows(reader)
    except OSError as exc:
        raise EventSourceError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    except (UnicodeDecodeError, csv.Error) as exc:
        raise EventSourceError(f"Cannot read {path}: {exc}") from exc
    events = list(collapse_repeats(parsed))
    logger.debug(
        "Loaded %d events from %s (%d repeats collapsed)",
        len(events),
        path,
        len(parsed) - len(events),
    )
    return events
