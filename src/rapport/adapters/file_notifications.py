"""File-based notification log adapter."""

import json
import logging
from pathlib import Path

from rapport.core.notifications import Notification

logger = logging.getLogger(__name__)


class FileNotificationLog:
    """
    Notification log stored as JSON lines.

    Implements NotificationSink protocol.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def send(self, notification: Notification) -> None:
        """Append a notification to the log."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a") as f:
            f.write(json.dumps(notification.to_dict()) + "\n")
        logger.info(f"Notification {notification.type} queued for {notification.user_id}")

    def for_user(self, user_id: str) -> list[Notification]:
        """Notifications for a user, oldest first."""
        if not self.path.exists():
            return []
        notifications = []
        for line in self.path.read_text().splitlines():
            if not line.strip():
                continue
            notification = Notification.from_dict(json.loads(line))
            if notification.user_id == user_id:
                notifications.append(notification)
        return notifications
