"""Calendar event repository interface."""

from datetime import datetime
from typing import Protocol

from rapport.core.calendar import StoredCalendarEvent


class CalendarEventRepository(Protocol):
    """Interface for persisting calendar events in any backend."""

    def list_candidates(self, user_id: str, range_end: datetime) -> list[StoredCalendarEvent]:
        """Events that may occur in a window ending at range_end.

        Non-recurring events starting on or before range_end, plus every
        recurring event, ordered by start_at ascending.
        """
        ...

    def get(self, user_id: str, event_id: str) -> StoredCalendarEvent | None:
        """Fetch one event owned by user_id. Returns None if not found."""
        ...

    def add(self, event: StoredCalendarEvent) -> None:
        """Persist a new event."""
        ...

    def save(self, event: StoredCalendarEvent) -> None:
        """Overwrite an existing event."""
        ...

    def delete(self, event_id: str) -> None:
        """Remove an event."""
        ...
