"""Tests for reminder bucketing."""

from datetime import date, datetime, timedelta

import pytest

from careshift.analytics.reminders import ReminderBucketer, bucket_reminders
from careshift.domain.models import ReminderRecord

TODAY = date(2024, 6, 10)
NOW = datetime(2024, 6, 10, 12, 0)


def make_reminder(reminder_id, day_offset=0, reminder_time=None, status="pending"):
    return ReminderRecord(
        id=reminder_id,
        client_id="c-1",
        title=f"Reminder {reminder_id}",
        reminder_date=TODAY + timedelta(days=day_offset),
        reminder_time=reminder_time,
        status=status,
    )


class TestReminderBucketer:
    """Tests for ReminderBucketer."""

    @pytest.fixture
    def bucketer(self):
        return ReminderBucketer()

    def test_yesterday_is_overdue(self, bucketer):
        buckets = bucketer.bucket([make_reminder("r-1", day_offset=-1)], TODAY)

        assert [r.id for r in buckets.overdue] == ["r-1"]
        assert buckets.due_today == []
        assert buckets.upcoming_week == []

    def test_buckets(self, bucketer):
        reminders = [
            make_reminder("r-1", day_offset=-10),
            make_reminder("r-2", day_offset=0),
            make_reminder("r-3", day_offset=1),
            make_reminder("r-4", day_offset=7),
            make_reminder("r-5", day_offset=8),
        ]
        buckets = bucketer.bucket(reminders, NOW)

        assert [r.id for r in buckets.overdue] == ["r-1"]
        assert [r.id for r in buckets.due_today] == ["r-2"]
        assert [r.id for r in buckets.upcoming_week] == ["r-3", "r-4"]

    def test_each_pending_reminder_in_at_most_one_bucket(self, bucketer):
        reminders = [make_reminder(f"r-{i}", day_offset=i) for i in range(-5, 12)]
        buckets = bucketer.bucket(reminders, NOW)

        ids = [r.id for r in buckets.overdue + buckets.due_today + buckets.upcoming_week]
        assert len(ids) == len(set(ids))
        # days 8 through 11 fall outside the week
        assert buckets.total == len(reminders) - 4

    def test_non_pending_ignored(self, bucketer):
        reminders = [
            make_reminder("r-1", day_offset=-1, status="completed"),
            make_reminder("r-2", day_offset=0, status="snoozed"),
            make_reminder("r-3", day_offset=0, status="Pending"),
        ]
        buckets = bucketer.bucket(reminders, NOW)

        assert buckets.total == 1
        assert buckets.due_today[0].id == "r-3"

    def test_sorted_by_date_then_time_untimed_first(self, bucketer):
        reminders = [
            make_reminder("r-1", day_offset=2, reminder_time="08:00"),
            make_reminder("r-2", day_offset=1, reminder_time="15:30"),
            make_reminder("r-3", day_offset=1, reminder_time=None),
            make_reminder("r-4", day_offset=1, reminder_time="09:00"),
        ]
        buckets = bucketer.bucket(reminders, NOW)

        assert [r.id for r in buckets.upcoming_week] == ["r-3", "r-4", "r-2", "r-1"]

    def test_malformed_time_sorts_as_untimed(self, bucketer):
        reminders = [
            make_reminder("r-1", reminder_time="07:00"),
            make_reminder("r-2", reminder_time="soon"),
        ]
        buckets = bucketer.bucket(reminders, NOW)

        assert [r.id for r in buckets.due_today] == ["r-2", "r-1"]

    def test_empty(self):
        buckets = bucket_reminders([], NOW)
        assert buckets.total == 0
