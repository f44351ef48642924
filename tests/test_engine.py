"""End-to-end tests for the analytics engine and record sources."""

import json
from datetime import date, datetime, timedelta

import pytest

from careshift.analytics.engine import AnalyticsEngine
from careshift.domain.models import (
    AnalyticsConfig,
    AppointmentRecord,
    ReminderRecord,
    ShiftRecord,
    StaffEarningsInput,
)
from careshift.sources import InMemoryRecordSource, JsonRecordSource, OrganizationRecords

TODAY = date(2024, 6, 10)
NOW = datetime(2024, 6, 10, 9, 0)


@pytest.fixture
def records() -> OrganizationRecords:
    """A small organization with a mix of shift outcomes."""
    shifts = [
        ShiftRecord("sh-1", "org-1", "s-1", "c-1", TODAY, "09:00", "17:00", 30, "scheduled"),
        ShiftRecord("sh-2", "org-1", "s-1", "c-2", TODAY - timedelta(days=2),
                    "08:00", "12:00", 0, "completed"),
        ShiftRecord("sh-3", "org-1", "s-2", "c-1", TODAY - timedelta(days=1),
                    "14:00", "18:00", 0, "completed"),
        ShiftRecord("sh-4", "org-1", "s-2", "c-3", TODAY + timedelta(days=3),
                    "09:00", "11:00", 0, "cancelled"),
        ShiftRecord("sh-5", "org-1", None, "c-3", TODAY, "10:00", "12:00", 0, "scheduled"),
        ShiftRecord("sh-6", "org-1", "s-1", "c-2", TODAY - timedelta(days=5),
                    "22:00", "02:00", 0, "completed"),
    ]
    appointments = [
        AppointmentRecord("a-1", "org-1", "c-1", date(2024, 5, 20), 200.0, "paid", "Home Care", 25.0),
        AppointmentRecord("a-2", "org-1", "c-2", date(2024, 6, 2), 300.0, "paid", "Wound Care", 35.0),
        AppointmentRecord("a-3", "org-1", "c-3", date(2024, 6, 5), 80.0, "pending", "Home Care"),
        AppointmentRecord("a-4", "org-2", "c-9", date(2024, 6, 5), 999.0, "paid", "Home Care"),
    ]
    reminders = [
        ReminderRecord("r-1", "c-1", "Review care plan", TODAY - timedelta(days=1)),
        ReminderRecord("r-2", "c-2", "Call family", TODAY, "15:00"),
        ReminderRecord("r-3", "c-3", "Order supplies", TODAY + timedelta(days=4)),
        ReminderRecord("r-4", "c-3", "Done already", TODAY, status="completed"),
    ]
    staff = [
        StaffEarningsInput("s-1", "Alice Moore", 20.0),
        StaffEarningsInput("s-2", "Ben Carter", 25.0),
    ]
    return OrganizationRecords(shifts, appointments, reminders, staff)


class TestAnalyticsEngine:
    """Tests for AnalyticsEngine.build_snapshot."""

    @pytest.fixture
    def engine(self):
        return AnalyticsEngine()

    def test_snapshot(self, engine, records):
        snapshot = engine.build_snapshot(
            shifts=records.shifts,
            appointments=[a for a in records.appointments if a.organization_id == "org-1"],
            reminders=records.reminders,
            staff_rates=records.staff,
            now=NOW,
            organization_id="org-1",
        )

        assert snapshot.generated_for == TODAY
        assert snapshot.total_shifts == 6

        by_staff = {s.staff_member_id: s for s in snapshot.staff_summaries}
        assert set(by_staff) == {"s-1", "s-2"}
        assert by_staff["s-1"].shift_count == 3
        assert by_staff["s-1"].today_count == 1
        assert by_staff["s-1"].total_hours == 7.5 + 4.0
        assert by_staff["s-1"].skipped_count == 1
        assert by_staff["s-2"].week_count == 1

        assert snapshot.reminders.counts() == {"overdue": 1, "due_today": 1, "upcoming_week": 1}

        assert snapshot.monthly_earnings == 300.0
        assert snapshot.revenue.month_over_month_growth == 50.0
        assert snapshot.average_hourly_rate == 30.0

        assert [(e.staff_member_id, e.total_earnings) for e in snapshot.top_staff] == [
            ("s-2", 100.0),
            ("s-1", 80.0),
        ]
        assert snapshot.top_staff[1].shifts_completed == 2

        assert snapshot.shift_stats.completed_count == 3
        assert snapshot.shift_stats.completion_rate == 50.0
        assert snapshot.upcoming_week.count == 3
        assert [s.id for s in snapshot.todays_shifts] == ["sh-1", "sh-5"]
        assert snapshot.active_clients == 3

        issue_ids = {i.record_id for i in snapshot.issues}
        assert "sh-6" in issue_ids
        assert "sh-5" in issue_ids
        assert snapshot.excluded_shift_ids == ["sh-6"]

    def test_deterministic(self, engine, records):
        kwargs = dict(
            shifts=records.shifts,
            appointments=records.appointments,
            reminders=records.reminders,
            staff_rates=records.staff,
            now=NOW,
        )
        first = engine.build_snapshot(**kwargs).to_dict()
        second = engine.build_snapshot(**kwargs).to_dict()

        assert first == second
        json.dumps(first)

    def test_overflowing_time_isolated_to_its_record(self, engine):
        shifts = [
            ShiftRecord("sh-ok", "org-1", "s-1", "c-1", TODAY, "09:00", "17:00", 30, "completed"),
            ShiftRecord("sh-bad", "org-1", "s-1", "c-1", TODAY, "09:00:1e999", "17:00", 0, "completed"),
        ]
        snapshot = engine.build_snapshot(shifts, [], [], [], TODAY)

        assert snapshot.total_shifts == 2
        assert snapshot.staff_summaries[0].total_hours == 7.5
        assert snapshot.staff_summaries[0].skipped_count == 1
        assert [p.as_tuple() for p in snapshot.shift_stats.peak_hours] == [(9, 1)]
        assert [s.id for s in snapshot.todays_shifts] == ["sh-ok", "sh-bad"]
        assert snapshot.excluded_shift_ids == ["sh-bad"]

    def test_empty_organization(self, engine):
        snapshot = engine.build_snapshot([], [], [], [], NOW)

        assert snapshot.total_shifts == 0
        assert snapshot.staff_summaries == []
        assert snapshot.top_staff == []
        assert snapshot.shift_stats.completion_rate == 0.0
        assert snapshot.revenue.month_over_month_growth == 0.0
        assert snapshot.reminders.total == 0
        assert snapshot.issues == []

    def test_config_is_shared(self, records):
        engine = AnalyticsEngine(AnalyticsConfig(top_k=1, peak_hour_count=1))
        snapshot = engine.build_snapshot(
            records.shifts, records.appointments, records.reminders, records.staff, NOW
        )

        assert len(snapshot.top_staff) == 1
        assert len(snapshot.shift_stats.peak_hours) == 1


class TestRecordSources:
    """Tests for building snapshots from record sources."""

    def test_in_memory_source(self, records):
        source = InMemoryRecordSource({"org-1": records})
        snapshot = AnalyticsEngine().build_for_organization(source, "org-1", NOW)

        assert snapshot.organization_id == "org-1"
        assert snapshot.revenue.total_revenue == 500.0
        assert snapshot.reminders.total == 3
        assert snapshot.active_clients == 3

    def test_in_memory_source_filters(self, records):
        source = InMemoryRecordSource({"org-1": records})

        shifts = source.list_shifts_for_org("org-1", (TODAY - timedelta(days=2), TODAY))
        assert [s.id for s in shifts] == ["sh-2", "sh-3", "sh-1", "sh-5"]
        paid = source.list_paid_appointments_for_org("org-1", date(2024, 6, 1))
        assert [a.id for a in paid] == ["a-2"]
        assert source.list_shifts_for_org("org-404") == []

    def test_json_source_single_organization(self, tmp_path):
        document = {
            "shifts": [{
                "id": "sh-1",
                "organizationId": "org-7",
                "staffMemberId": "s-1",
                "shiftDate": "2024-06-10",
                "startTime": "09:00:00",
                "endTime": "13:00:00",
                "breakMinutes": 0,
                "status": "completed",
            }],
            "appointments": [{
                "id": "a-1",
                "organizationId": "org-7",
                "clientId": "c-1",
                "appointmentDate": "2024-06-03",
                "totalCost": 120,
                "paymentStatus": "paid",
                "serviceType": "Home Care",
            }],
            "reminders": [],
            "staff": [{"id": "s-1", "firstName": "Ada", "lastName": "Lee", "hourlyRate": 15}],
        }
        path = tmp_path / "records.json"
        path.write_text(json.dumps(document))

        source = JsonRecordSource.from_file(path)
        assert source.organization_ids == ["org-7"]

        snapshot = AnalyticsEngine().build_for_organization(source, "org-7", NOW)
        assert snapshot.top_staff[0].display_name == "Ada Lee"
        assert snapshot.top_staff[0].total_earnings == 60.0
        assert snapshot.monthly_earnings == 120.0

    def test_json_source_multiple_organizations(self):
        source = JsonRecordSource.from_data({
            "organizations": {
                "org-b": {"shifts": []},
                "org-a": {"shifts": []},
            }
        })

        assert source.organization_ids == ["org-a", "org-b"]
