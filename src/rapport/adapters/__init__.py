"""Adapters - I/O implementations of ports."""

from .file_event_store import FileCalendarStore
from .file_notifications import FileNotificationLog

__all__ = [
    "FileCalendarStore",
    "FileNotificationLog",
]
