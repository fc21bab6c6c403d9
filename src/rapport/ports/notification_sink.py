"""Notification delivery interface."""

from typing import Protocol

from rapport.core.notifications import Notification


class NotificationSink(Protocol):
    """Interface for delivering notifications to users."""

    def send(self, notification: Notification) -> None:
        """Deliver a notification."""
        ...
