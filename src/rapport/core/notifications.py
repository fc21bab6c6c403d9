"""Notification data model - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

CALENDAR_REMINDER = "CALENDAR_REMINDER"


@dataclass
class Notification:
    """An in-app notification addressed to one user."""

    user_id: str
    type: str
    message: str
    link_url: str | None = None
    calendar_event_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "type": self.type,
            "message": self.message,
            "linkUrl": self.link_url,
            "calendarEventId": self.calendar_event_id,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Notification":
        return cls(
            user_id=data["userId"],
            type=data["type"],
            message=data["message"],
            link_url=data.get("linkUrl"),
            calendar_event_id=data.get("calendarEventId"),
            created_at=datetime.fromisoformat(data["createdAt"]),
        )


def calendar_reminder(user_id: str, event_id: str, title: str) -> Notification:
    """Build the reminder sent when a calendar event is created."""
    return Notification(
        user_id=user_id,
        type=CALENDAR_REMINDER,
        message=f"Upcoming event: {title}",
        link_url="/calendar",
        calendar_event_id=event_id,
    )
