"""Tests for the top-earning staff ranking."""

from datetime import date

import pytest

from careshift.analytics.ranking import StaffRanker, rank_top_staff
from careshift.domain.models import AnalyticsConfig, ShiftRecord, StaffEarningsInput


def make_shift(shift_id, staff_id, start="09:00", end="17:00", break_minutes=60,
               status="completed") -> ShiftRecord:
    return ShiftRecord(
        id=shift_id,
        organization_id="org-1",
        staff_member_id=staff_id,
        client_id="c-1",
        shift_date=date(2024, 6, 3),
        start_time=start,
        end_time=end,
        break_minutes=break_minutes,
        status=status,
    )


class TestStaffRanker:
    """Tests for StaffRanker."""

    @pytest.fixture
    def staff(self):
        return [
            StaffEarningsInput("s-1", "Alice", 20.0),
            StaffEarningsInput("s-2", "Ben", 30.0),
            StaffEarningsInput("s-3", "Chloe", 10.0),
        ]

    @pytest.fixture
    def ranker(self):
        return StaffRanker()

    def test_earnings_ignore_breaks(self, ranker, staff):
        ranking = ranker.rank([make_shift("sh-1", "s-1", break_minutes=60)], staff)

        assert ranking[0].total_earnings == 8 * 20.0
        assert ranking[0].shifts_completed == 1
        assert ranking[0].display_name == "Alice"

    def test_sorted_by_earnings(self, ranker, staff):
        shifts = [
            make_shift("sh-1", "s-1"),
            make_shift("sh-2", "s-2"),
            make_shift("sh-3", "s-3"),
            make_shift("sh-4", "s-3"),
        ]
        ranking = ranker.rank(shifts, staff)

        assert [e.staff_member_id for e in ranking] == ["s-2", "s-1", "s-3"]
        assert [e.total_earnings for e in ranking] == [240.0, 160.0, 160.0]

    def test_ties_break_by_staff_id(self, ranker):
        staff = [StaffEarningsInput("s-b", "B", 10.0), StaffEarningsInput("s-a", "A", 10.0)]
        shifts = [make_shift("sh-1", "s-b"), make_shift("sh-2", "s-a")]

        assert [e.staff_member_id for e in ranker.rank(shifts, staff)] == ["s-a", "s-b"]

    def test_bounded_by_k(self, ranker, staff):
        shifts = [make_shift(f"sh-{s.staff_member_id}", s.staff_member_id) for s in staff]

        assert len(ranker.rank(shifts, staff, k=2)) == 2
        assert ranker.rank(shifts, staff, k=0) == []

    def test_default_k_from_config(self, staff):
        ranker = StaffRanker(AnalyticsConfig(top_k=1))
        shifts = [make_shift(f"sh-{s.staff_member_id}", s.staff_member_id) for s in staff]

        assert len(ranker.rank(shifts, staff)) == 1

    def test_unknown_and_unassigned_staff_excluded(self, ranker, staff):
        shifts = [
            make_shift("sh-1", "s-1"),
            make_shift("sh-2", "s-404"),
            make_shift("sh-3", None),
        ]
        ranking = ranker.rank(shifts, staff)

        assert [e.staff_member_id for e in ranking] == ["s-1"]

    def test_only_completed_shifts_count(self, ranker, staff):
        shifts = [
            make_shift("sh-1", "s-1"),
            make_shift("sh-2", "s-1", status="cancelled"),
        ]
        ranking = ranker.rank(shifts, staff)

        assert ranking[0].shifts_completed == 1

    def test_bad_times_count_without_earnings(self, ranker, staff):
        shifts = [
            make_shift("sh-1", "s-1"),
            make_shift("sh-2", "s-1", start="20:00", end="04:00"),
        ]
        entry = ranker.rank(shifts, staff)[0]

        assert entry.shifts_completed == 2
        assert entry.total_earnings == 160.0

    def test_functional_entry_point(self, staff):
        assert rank_top_staff([], staff) == []
