"""Reminder urgency buckets."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Union

from careshift.domain.models import AnalyticsConfig, ReminderBuckets, ReminderRecord
from careshift.domain.timeutils import local_today, parse_time
from careshift.exceptions import InvalidShiftTimeError

logger = logging.getLogger(__name__)


class ReminderBucketer:
    """Splits pending reminders into overdue, due-today and upcoming-week.

    Every pending reminder lands in at most one bucket; reminders past the
    week horizon land in none. Non-pending reminders are ignored.
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or AnalyticsConfig()

    def bucket(
        self,
        reminders: Iterable[ReminderRecord],
        now: Union[date, datetime],
    ) -> ReminderBuckets:
        """Bucket reminders relative to today.

        Args:
            reminders: Reminder records, normally already filtered to pending.
            now: Reference time.

        Returns:
            ReminderBuckets, each list sorted by date then time (reminders
            without a time first).
        """
        today = local_today(now, self.config.timezone)
        horizon = today + timedelta(days=self.config.upcoming_days)

        overdue = []
        due_today = []
        upcoming = []

        for reminder in reminders:
            if not reminder.is_pending:
                continue
            if reminder.reminder_date < today:
                overdue.append(reminder)
            elif reminder.reminder_date == today:
                due_today.append(reminder)
            elif reminder.reminder_date <= horizon:
                upcoming.append(reminder)

        return ReminderBuckets(
            overdue=sorted(overdue, key=self._sort_key),
            due_today=sorted(due_today, key=self._sort_key),
            upcoming_week=sorted(upcoming, key=self._sort_key),
        )

    def _sort_key(self, reminder: ReminderRecord) -> tuple[date, int, time, str]:
        reminder_time = self._reminder_time(reminder)
        if reminder_time is None:
            return (reminder.reminder_date, 0, time.min, reminder.id)
        return (reminder.reminder_date, 1, reminder_time, reminder.id)

    @staticmethod
    def _reminder_time(reminder: ReminderRecord) -> Optional[time]:
        if reminder.reminder_time is None:
            return None
        try:
            return parse_time(reminder.reminder_time)
        except InvalidShiftTimeError:
            logger.warning(
                "Reminder %s has malformed time %r; sorting it as untimed",
                reminder.id,
                reminder.reminder_time,
            )
            return None


def bucket_reminders(
    reminders: Iterable[ReminderRecord],
    now: Union[date, datetime],
    config: Optional[AnalyticsConfig] = None,
) -> ReminderBuckets:
    """Bucket pending reminders into overdue, due today and upcoming week."""
    return ReminderBucketer(config).bucket(reminders, now)
