"""Functional core - pure business logic with no I/O."""

from .calendar import (
    ExpandedOccurrence,
    RecurrenceRuleError,
    StoredCalendarEvent,
    calendar_id_for,
    expand_events,
    format_for_display,
    sort_occurrences_by_start,
)
from .notifications import Notification, calendar_reminder

__all__ = [
    # Calendar
    "StoredCalendarEvent",
    "ExpandedOccurrence",
    "RecurrenceRuleError",
    "expand_events",
    "format_for_display",
    "calendar_id_for",
    "sort_occurrences_by_start",
    # Notifications
    "Notification",
    "calendar_reminder",
]
