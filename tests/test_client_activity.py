"""Tests for client activity figures."""

from datetime import date, datetime, timedelta

import pytest

from careshift.analytics.client_activity import (
    ClientActivity,
    count_active_clients,
    summarize_upcoming_week,
    todays_shifts,
)
from careshift.domain.models import AppointmentRecord, ShiftRecord

TODAY = date(2024, 6, 10)
NOW = datetime(2024, 6, 10, 8, 0)


def make_appointment(appt_id, client_id, day_offset, payment_status="pending"):
    return AppointmentRecord(
        id=appt_id,
        organization_id="org-1",
        client_id=client_id,
        appointment_date=TODAY + timedelta(days=day_offset),
        total_cost=50.0,
        payment_status=payment_status,
    )


def make_shift(shift_id, day_offset=0, start="09:00", end="13:00", client_id="c-1",
               break_minutes=0):
    return ShiftRecord(
        id=shift_id,
        organization_id="org-1",
        staff_member_id="s-1",
        client_id=client_id,
        shift_date=TODAY + timedelta(days=day_offset),
        start_time=start,
        end_time=end,
        break_minutes=break_minutes,
    )


class TestActiveClients:
    """Tests for count_active_clients."""

    def test_distinct_clients_in_period(self):
        appointments = [
            make_appointment("a-1", "c-1", 0),
            make_appointment("a-2", "c-1", -3),
            make_appointment("a-3", "c-2", -30),
            make_appointment("a-4", "c-3", -31),
            make_appointment("a-5", "c-4", 2),
        ]

        assert count_active_clients(appointments, NOW) == 2

    def test_any_payment_status(self):
        appointments = [
            make_appointment("a-1", "c-1", -1, payment_status="paid"),
            make_appointment("a-2", "c-2", -1, payment_status="failed"),
        ]

        assert count_active_clients(appointments, NOW, days=7) == 2


class TestUpcomingWeek:
    """Tests for summarize_upcoming_week."""

    @pytest.fixture
    def activity(self):
        return ClientActivity()

    def test_count_and_hours(self, activity):
        shifts = [
            make_shift("sh-1", day_offset=0),
            make_shift("sh-2", day_offset=3, break_minutes=20),
            make_shift("sh-3", day_offset=7),
            make_shift("sh-4", day_offset=8),
            make_shift("sh-5", day_offset=-1),
        ]
        summary = activity.summarize_upcoming_week(shifts, NOW)

        assert summary.count == 3
        # 4 + 3h40m + 4 = 11.67, rounded to one decimal
        assert summary.total_hours == 11.7

    def test_filter_by_client(self):
        shifts = [make_shift("sh-1", client_id="c-1"), make_shift("sh-2", client_id="c-2")]

        summary = summarize_upcoming_week(shifts, NOW, client_id="c-2")
        assert summary.count == 1

    def test_bad_times_counted_without_hours(self, activity):
        shifts = [make_shift("sh-1"), make_shift("sh-2", start="18:00", end="06:00")]
        summary = activity.summarize_upcoming_week(shifts, NOW)

        assert summary.count == 2
        assert summary.total_hours == 4.0


class TestTodaysShifts:
    """Tests for todays_shifts."""

    def test_sorted_and_limited(self):
        shifts = [
            make_shift("sh-1", start="14:00", end="18:00"),
            make_shift("sh-2", start="07:00", end="09:00"),
            make_shift("sh-3", day_offset=1, start="06:00", end="08:00"),
            make_shift("sh-4", start="09:00", end="10:00"),
            make_shift("sh-5", start="bad", end="10:00"),
            make_shift("sh-6", start="08:00", end="10:00"),
            make_shift("sh-7", start="12:00", end="13:00"),
        ]

        result = todays_shifts(shifts, NOW)
        assert [s.id for s in result] == ["sh-2", "sh-6", "sh-4", "sh-7", "sh-1"]

    def test_unreadable_start_listed_last(self):
        shifts = [make_shift("sh-1", start="bad"), make_shift("sh-2", start="16:00", end="17:00")]

        assert [s.id for s in todays_shifts(shifts, NOW, limit=10)] == ["sh-2", "sh-1"]
