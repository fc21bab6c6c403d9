"""Pure calendar domain logic - no I/O dependencies."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from dateutil.rrule import rrulestr

DEFAULT_DURATION = timedelta(hours=1)
STANDALONE = "STANDALONE"

_UNTIL_PATTERN = re.compile(r"UNTIL=([0-9T]+Z?)", re.IGNORECASE)


class RecurrenceRuleError(ValueError):
    """Raised when a stored recurrence rule cannot be parsed."""

    def __init__(self, event_id: str, rule: str, reason: str):
        self.event_id = event_id
        self.rule = rule
        super().__init__(f"Invalid recurrence rule for event {event_id}: {reason}")


@dataclass
class StoredCalendarEvent:
    """A persisted calendar event, possibly recurring."""

    id: str
    title: str
    start_at: datetime
    end_at: datetime | None = None
    description: str | None = None
    is_all_day: bool = False
    color: str | None = None
    recurrence_rule: str | None = None
    source_type: str = STANDALONE
    source_task_id: str | None = None
    user_id: str = ""
    category: str | None = None
    timezone: str = "UTC"

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurrence_rule)

    def duration(self) -> timedelta:
        """Length of one occurrence; one hour when there is no end."""
        if self.end_at is None:
            return DEFAULT_DURATION
        return _to_utc(self.end_at) - _to_utc(self.start_at)


@dataclass
class ExpandedOccurrence:
    """One concrete, display-ready instance of a calendar event."""

    id: str
    title: str
    description: str | None
    start: str
    end: str
    calendar_id: str
    is_all_day: bool
    source_type: str
    source_task_id: str | None
    original_event_id: str

    def to_dict(self) -> dict:
        """Serialize in the shape the calendar grid consumes."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start": self.start,
            "end": self.end,
            "calendarId": self.calendar_id,
            "isAllDay": self.is_all_day,
            "sourceType": self.source_type,
            "sourceTaskId": self.source_task_id,
            "originalEventId": self.original_event_id,
        }


def _as_utc(value: datetime) -> datetime:
    """Return an aware datetime, reading naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_utc(value: datetime) -> datetime:
    """Convert to UTC so arithmetic runs on elapsed time, not wall-clock time."""
    return _as_utc(value).astimezone(timezone.utc)


def _align(value: datetime, reference: datetime) -> datetime:
    """Match the awareness of `value` to `reference` so they compare."""
    if reference.tzinfo is None:
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return _as_utc(value)


def _iso_instant(value: datetime) -> str:
    """Render an instant as UTC with millisecond precision, e.g. 2024-06-01T09:00:00.000Z."""
    utc = _to_utc(value)
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def format_for_display(value: datetime, all_day: bool, tz: tzinfo | None = None) -> str:
    """
    Format a timestamp for the calendar grid.

    All-day values render as YYYY-MM-DD, taken from the UTC date of the
    instant. Timed values render as YYYY-MM-DD HH:MM in the wall-clock time
    of `tz` (the runtime's local zone when None). Naive values are read as UTC.
    """
    if all_day:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"

    value = _as_utc(value).astimezone(tz)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}"
    )


def calendar_id_for(event: StoredCalendarEvent) -> str:
    """Grouping key: the event color if set, otherwise its lowercased source type."""
    if event.color:
        return event.color
    return event.source_type.lower()


def _anchor_for(rule: str, start_at: datetime) -> datetime:
    """Give the fallback anchor the same awareness as the rule's UNTIL."""
    match = _UNTIL_PATTERN.search(rule)
    if match is None:
        return start_at
    if match.group(1).upper().endswith("Z"):
        return _as_utc(start_at)
    # Date-only or floating UNTIL needs a naive anchor
    return _to_utc(start_at).replace(tzinfo=None)


def parse_recurrence(event: StoredCalendarEvent):
    """
    Parse an event's recurrence rule.

    A DTSTART line inside the rule wins; `start_at` anchors rules without one.
    Raises RecurrenceRuleError for anything dateutil rejects.
    """
    rule = event.recurrence_rule
    try:
        return rrulestr(rule, dtstart=_anchor_for(rule, event.start_at))
    except (ValueError, TypeError, AttributeError) as e:
        raise RecurrenceRuleError(event.id, rule, str(e)) from e


def _occurrence(
    event: StoredCalendarEvent,
    occurrence_id: str,
    start: datetime,
    end: datetime,
    tz: tzinfo | None,
) -> ExpandedOccurrence:
    return ExpandedOccurrence(
        id=occurrence_id,
        title=event.title,
        description=event.description,
        start=format_for_display(start, event.is_all_day, tz),
        end=format_for_display(end, event.is_all_day, tz),
        calendar_id=calendar_id_for(event),
        is_all_day=event.is_all_day,
        source_type=event.source_type,
        source_task_id=event.source_task_id,
        original_event_id=event.id,
    )


def _expand_single(
    event: StoredCalendarEvent,
    range_start: datetime,
    range_end: datetime,
    tz: tzinfo | None,
) -> list[ExpandedOccurrence]:
    end_at = event.end_at or _to_utc(event.start_at) + DEFAULT_DURATION

    # Inclusive on both ends: touching the window counts as overlapping
    if _as_utc(event.start_at) <= _as_utc(range_end) and _as_utc(end_at) >= _as_utc(range_start):
        return [_occurrence(event, event.id, event.start_at, end_at, tz)]
    return []


def _expand_recurring(
    event: StoredCalendarEvent,
    range_start: datetime,
    range_end: datetime,
    tz: tzinfo | None,
) -> list[ExpandedOccurrence]:
    rule = parse_recurrence(event)
    duration = event.duration()

    first = next(iter(rule), None)
    if first is None:
        return []

    occurrences = rule.between(_align(range_start, first), _align(range_end, first), inc=True)
    return [
        _occurrence(event, f"{event.id}_{_iso_instant(start)}", start, _to_utc(start) + duration, tz)
        for start in occurrences
    ]


def expand_events(
    events: list[StoredCalendarEvent],
    range_start: datetime,
    range_end: datetime,
    tz: tzinfo | None = None,
) -> list[ExpandedOccurrence]:
    """
    Flatten stored events into the occurrences that fall inside a window.

    Pure function - no I/O.

    Args:
        events: Candidate events (non-recurring ones near the window, plus
            every recurring event)
        range_start: Window start, inclusive
        range_end: Window end, inclusive
        tz: Zone for rendering timed occurrences (local zone when None)

    Returns:
        Occurrences in input order, each event's occurrences ascending.

    Raises:
        RecurrenceRuleError: On the first event whose rule cannot be parsed.
    """
    expanded = []
    for event in events:
        if event.is_recurring:
            expanded.extend(_expand_recurring(event, range_start, range_end, tz))
        else:
            expanded.extend(_expand_single(event, range_start, range_end, tz))
    return expanded


def sort_occurrences_by_start(occurrences: list[ExpandedOccurrence]) -> list[ExpandedOccurrence]:
    """Sort occurrences chronologically by their formatted start."""
    return sorted(occurrences, key=lambda o: o.start)
