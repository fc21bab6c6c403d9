"""Calendar workflows shared by the CLI and any future web layer.

Each function takes its repositories explicitly, validates the caller's
input, and raises a CalendarError subclass carrying an HTTP-like status.
"""

import logging
import uuid
from datetime import datetime, tzinfo

from dateutil.parser import isoparse

from .adapters.file_event_store import FileCalendarStore
from .adapters.file_notifications import FileNotificationLog
from .config import Config
from .core.calendar import (
    STANDALONE,
    ExpandedOccurrence,
    RecurrenceRuleError,
    StoredCalendarEvent,
    expand_events,
    parse_recurrence,
)
from .core.notifications import calendar_reminder
from .ports import CalendarEventRepository, NotificationSink

logger = logging.getLogger(__name__)


class CalendarError(Exception):
    """Base class for calendar request errors."""

    status = 400


class RangeError(CalendarError):
    """Raised when the query window is missing or unparseable."""

    pass


class ValidationError(CalendarError):
    """Raised when an event payload is invalid."""

    pass


class NotFoundError(CalendarError):
    """Raised when an event does not exist for the requesting user."""

    status = 404


class ImmutableEventError(CalendarError):
    """Raised when editing an event generated from a task or reminder."""

    pass


def get_store(config: Config) -> FileCalendarStore:
    """Resolve the event store from config."""
    return FileCalendarStore(config.resolve_data_dir() / "calendar_events.json")


def get_notifier(config: Config) -> FileNotificationLog:
    """Resolve the notification log from config."""
    return FileNotificationLog(config.resolve_data_dir() / "notifications.jsonl")


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return isoparse(value)


def parse_range(start: str | None, end: str | None) -> tuple[datetime, datetime]:
    """Parse the start/end query parameters into a window."""
    if not start or not end:
        raise RangeError("start and end query parameters are required")
    try:
        return isoparse(start), isoparse(end)
    except (ValueError, OverflowError) as e:
        raise RangeError("Invalid date format for start or end") from e


def list_calendar_events(
    repo: CalendarEventRepository,
    user_id: str,
    start: str | None,
    end: str | None,
    tz: tzinfo | None = None,
) -> list[ExpandedOccurrence]:
    """Expand a user's events into the occurrences inside [start, end]."""
    range_start, range_end = parse_range(start, end)
    events = repo.list_candidates(user_id, range_end)
    try:
        occurrences = expand_events(events, range_start, range_end, tz)
    except RecurrenceRuleError:
        logger.exception("Error listing calendar events")
        raise
    logger.debug(f"Expanded {len(events)} events into {len(occurrences)} occurrences")
    return occurrences


def _check_rule(event: StoredCalendarEvent) -> None:
    if not event.recurrence_rule:
        return
    try:
        parse_recurrence(event)
    except RecurrenceRuleError as e:
        raise ValidationError(str(e)) from e


def _parse_payload_timestamp(payload: dict, key: str) -> datetime | None:
    value = payload.get(key)
    if not value:
        return None
    try:
        return _parse_timestamp(value)
    except (ValueError, OverflowError, TypeError, AttributeError) as e:
        raise ValidationError(f"Invalid date format for {key}") from e


def create_calendar_event(
    repo: CalendarEventRepository,
    notifier: NotificationSink,
    user_id: str,
    payload: dict,
) -> StoredCalendarEvent:
    """Create a standalone event and send its reminder notification."""
    title = payload.get("title")
    if not title or not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")

    if not payload.get("startAt"):
        raise ValidationError("Start date is required")

    event = StoredCalendarEvent(
        id=uuid.uuid4().hex,
        user_id=user_id,
        title=title.strip(),
        description=payload.get("description") or None,
        start_at=_parse_payload_timestamp(payload, "startAt"),
        end_at=_parse_payload_timestamp(payload, "endAt"),
        is_all_day=bool(payload.get("isAllDay", False)),
        color=payload.get("color") or None,
        category=payload.get("category") or None,
        recurrence_rule=payload.get("recurrenceRule") or None,
        source_type=STANDALONE,
        timezone=payload.get("timezone") or "UTC",
    )
    _check_rule(event)

    repo.add(event)
    logger.info(f"Created calendar event {event.id} for {user_id}")

    notifier.send(calendar_reminder(user_id, event.id, event.title))
    return event


def _get_standalone(
    repo: CalendarEventRepository, user_id: str, event_id: str, action: str
) -> StoredCalendarEvent:
    event = repo.get(user_id, event_id)
    if event is None:
        raise NotFoundError("Calendar event not found")
    if event.source_type != STANDALONE:
        raise ImmutableEventError(f"Cannot directly {action} task or reminder events")
    return event


def update_calendar_event(
    repo: CalendarEventRepository,
    user_id: str,
    event_id: str,
    payload: dict,
) -> StoredCalendarEvent:
    """Apply the fields present in payload to a standalone event."""
    event = _get_standalone(repo, user_id, event_id, "modify")

    if "title" in payload:
        event.title = payload["title"]
    if "description" in payload:
        event.description = payload["description"]
    if "startAt" in payload:
        start_at = _parse_payload_timestamp(payload, "startAt")
        if start_at is None:
            raise ValidationError("Start date is required")
        event.start_at = start_at
    if "endAt" in payload:
        event.end_at = _parse_payload_timestamp(payload, "endAt")
    if "isAllDay" in payload:
        event.is_all_day = bool(payload["isAllDay"])
    if "color" in payload:
        event.color = payload["color"]
    if "category" in payload:
        event.category = payload["category"]
    if "recurrenceRule" in payload:
        event.recurrence_rule = payload["recurrenceRule"]
    if "timezone" in payload:
        event.timezone = payload["timezone"]
    _check_rule(event)

    repo.save(event)
    logger.info(f"Updated calendar event {event_id}")
    return event


def delete_calendar_event(repo: CalendarEventRepository, user_id: str, event_id: str) -> None:
    """Delete a standalone event."""
    _get_standalone(repo, user_id, event_id, "delete")
    repo.delete(event_id)
    logger.info(f"Deleted calendar event {event_id}")
