"""Ports - interfaces/protocols for external dependencies."""

from .event_repo import CalendarEventRepository
from .notification_sink import NotificationSink

__all__ = [
    "CalendarEventRepository",
    "NotificationSink",
]
