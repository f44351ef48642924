"""Client-facing activity views for the dashboard.

Covers the smaller dashboard figures: active clients over a trailing
period, the shift load for the coming week, and the list of today's shifts.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from careshift.domain.models import (
    AnalyticsConfig,
    AppointmentRecord,
    ShiftRecord,
    UpcomingShiftSummary,
)
from careshift.domain.timeutils import local_today, minutes_of_day, net_hours
from careshift.exceptions import InvalidShiftTimeError

logger = logging.getLogger(__name__)


class ClientActivity:
    """Computes client activity figures relative to a reference time."""

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or AnalyticsConfig()

    def count_active_clients(
        self,
        appointments: Iterable[AppointmentRecord],
        now: Union[date, datetime],
        days: Optional[int] = None,
    ) -> int:
        """Count distinct clients with an appointment in the trailing period.

        Args:
            appointments: Appointments of any payment status.
            now: Reference time.
            days: Look-back in days (defaults to config.active_client_days).
        """
        look_back = self.config.active_client_days if days is None else days
        today = local_today(now, self.config.timezone)
        since = today - timedelta(days=look_back)
        clients = {
            a.client_id for a in appointments
            if since <= a.appointment_date <= today
        }
        return len(clients)

    def summarize_upcoming_week(
        self,
        shifts: Iterable[ShiftRecord],
        now: Union[date, datetime],
        client_id: Optional[str] = None,
    ) -> UpcomingShiftSummary:
        """Count shifts and net hours dated within the rolling week.

        Args:
            shifts: Shift records of any status.
            now: Reference time.
            client_id: Restrict to one client's shifts.

        Returns:
            Count and net hours rounded to one decimal place.
        """
        today = local_today(now, self.config.timezone)
        horizon = today + timedelta(days=self.config.upcoming_days)

        count = 0
        hours = 0.0
        for shift in shifts:
            if client_id is not None and shift.client_id != client_id:
                continue
            if not today <= shift.shift_date <= horizon:
                continue
            count += 1
            try:
                hours += net_hours(shift.start_time, shift.end_time, shift.break_minutes)
            except InvalidShiftTimeError as exc:
                logger.warning("Skipping hours for shift %s: %s", shift.id, exc)

        return UpcomingShiftSummary(count=count, total_hours=round(hours, 1))

    def todays_shifts(
        self,
        shifts: Iterable[ShiftRecord],
        now: Union[date, datetime],
        limit: Optional[int] = None,
    ) -> list[ShiftRecord]:
        """Shifts dated today, earliest start first.

        Shifts with unreadable start times are listed last.
        """
        cap = self.config.today_shift_limit if limit is None else max(0, limit)
        today = local_today(now, self.config.timezone)
        todays = [s for s in shifts if s.shift_date == today]
        todays.sort(key=self._start_sort_key)
        return todays[:cap]

    @staticmethod
    def _start_sort_key(shift: ShiftRecord) -> tuple[int, float, str]:
        try:
            return (0, minutes_of_day(shift.start_time), shift.id)
        except InvalidShiftTimeError:
            return (1, 0.0, shift.id)


def count_active_clients(
    appointments: Iterable[AppointmentRecord],
    now: Union[date, datetime],
    days: int = 30,
) -> int:
    """Count distinct clients with an appointment in the last ``days`` days."""
    return ClientActivity().count_active_clients(appointments, now, days=days)


def summarize_upcoming_week(
    shifts: Iterable[ShiftRecord],
    now: Union[date, datetime],
    client_id: Optional[str] = None,
) -> UpcomingShiftSummary:
    """Shift count and rounded net hours over the next seven days."""
    return ClientActivity().summarize_upcoming_week(shifts, now, client_id=client_id)


def todays_shifts(
    shifts: Iterable[ShiftRecord],
    now: Union[date, datetime],
    limit: int = 5,
) -> list[ShiftRecord]:
    """Today's shifts, earliest start first."""
    return ClientActivity().todays_shifts(shifts, now, limit=limit)
