"""Tests for notifications and the file notification log."""

from datetime import datetime, timezone

from rapport.adapters.file_notifications import FileNotificationLog
from rapport.core.notifications import CALENDAR_REMINDER, Notification, calendar_reminder


class TestCalendarReminder:
    def test_builds_reminder(self):
        n = calendar_reminder("u1", "evt-1", "Dinner")
        assert n.user_id == "u1"
        assert n.type == CALENDAR_REMINDER
        assert n.message == "Upcoming event: Dinner"
        assert n.link_url == "/calendar"
        assert n.calendar_event_id == "evt-1"
        assert n.created_at.tzinfo is not None

    def test_dict_round_trip(self):
        n = Notification(
            user_id="u1",
            type=CALENDAR_REMINDER,
            message="Upcoming event: Dinner",
            created_at=datetime(2024, 6, 10, 8, 0, tzinfo=timezone.utc),
        )
        assert Notification.from_dict(n.to_dict()) == n


class TestFileNotificationLog:
    def test_empty_when_missing(self, tmp_path):
        log = FileNotificationLog(tmp_path / "notifications.jsonl")
        assert log.for_user("u1") == []

    def test_send_appends(self, tmp_path):
        log = FileNotificationLog(tmp_path / "nested" / "notifications.jsonl")
        log.send(calendar_reminder("u1", "evt-1", "First"))
        log.send(calendar_reminder("u1", "evt-2", "Second"))

        lines = log.path.read_text().splitlines()
        assert len(lines) == 2
        assert [n.message for n in log.for_user("u1")] == [
            "Upcoming event: First",
            "Upcoming event: Second",
        ]

    def test_filters_by_user(self, tmp_path):
        log = FileNotificationLog(tmp_path / "notifications.jsonl")
        log.send(calendar_reminder("u1", "evt-1", "Mine"))
        log.send(calendar_reminder("u2", "evt-2", "Theirs"))
        assert [n.calendar_event_id for n in log.for_user("u2")] == ["evt-2"]
