"""File-based calendar event storage adapter."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from rapport.core.calendar import StoredCalendarEvent

logger = logging.getLogger(__name__)


def _dump_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _load_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _sort_key(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def event_to_record(event: StoredCalendarEvent) -> dict:
    """Serialize an event to a JSON-friendly record."""
    return {
        "id": event.id,
        "userId": event.user_id,
        "title": event.title,
        "description": event.description,
        "startAt": _dump_dt(event.start_at),
        "endAt": _dump_dt(event.end_at),
        "isAllDay": event.is_all_day,
        "color": event.color,
        "category": event.category,
        "recurrenceRule": event.recurrence_rule,
        "sourceType": event.source_type,
        "sourceTaskId": event.source_task_id,
        "timezone": event.timezone,
    }


def event_from_record(data: dict) -> StoredCalendarEvent:
    """Rebuild an event from a stored record."""
    return StoredCalendarEvent(
        id=data["id"],
        user_id=data.get("userId", ""),
        title=data["title"],
        description=data.get("description"),
        start_at=_load_dt(data["startAt"]),
        end_at=_load_dt(data.get("endAt")),
        is_all_day=data.get("isAllDay", False),
        color=data.get("color"),
        category=data.get("category"),
        recurrence_rule=data.get("recurrenceRule"),
        source_type=data.get("sourceType", "STANDALONE"),
        source_task_id=data.get("sourceTaskId"),
        timezone=data.get("timezone", "UTC"),
    )


class FileCalendarStore:
    """
    File-based calendar event storage.

    Implements CalendarEventRepository protocol. All events live in a single
    JSON file as a list of records.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read(self) -> list[StoredCalendarEvent]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text())
        return [event_from_record(item) for item in data]

    def _write(self, events: list[StoredCalendarEvent]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([event_to_record(e) for e in events], indent=2))

    def all(self) -> list[StoredCalendarEvent]:
        """
        Every stored event, for every user.

        Not part of CalendarEventRepository; used for inspection and tests.
        """
        return self._read()

    def list_candidates(self, user_id: str, range_end: datetime) -> list[StoredCalendarEvent]:
        """Non-recurring events starting by range_end, plus all recurring events."""
        cutoff = _sort_key(range_end)
        candidates = [
            e
            for e in self._read()
            if e.user_id == user_id and (e.is_recurring or _sort_key(e.start_at) <= cutoff)
        ]
        logger.debug(f"{len(candidates)} candidate events for {user_id} up to {range_end.isoformat()}")
        return sorted(candidates, key=lambda e: _sort_key(e.start_at))

    def get(self, user_id: str, event_id: str) -> StoredCalendarEvent | None:
        for event in self._read():
            if event.id == event_id and event.user_id == user_id:
                return event
        return None

    def add(self, event: StoredCalendarEvent) -> None:
        events = self._read()
        if any(e.id == event.id for e in events):
            raise ValueError(f"Calendar event {event.id} already exists")
        events.append(event)
        self._write(events)

    def save(self, event: StoredCalendarEvent) -> None:
        events = self._read()
        for i, existing in enumerate(events):
            if existing.id == event.id:
                events[i] = event
                break
        else:
            raise KeyError(event.id)
        self._write(events)

    def delete(self, event_id: str) -> None:
        events = self._read()
        remaining = [e for e in events if e.id != event_id]
        if len(remaining) == len(events):
            raise KeyError(event_id)
        self._write(remaining)
