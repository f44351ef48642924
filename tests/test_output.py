"""Tests for report generators."""

from datetime import date, datetime, timedelta

import pytest

from careshift.analytics.engine import AnalyticsEngine
from careshift.domain.models import (
    AppointmentRecord,
    ReminderRecord,
    ShiftRecord,
    StaffEarningsInput,
)
from careshift.output.pdf_generator import PDFGenerator
from careshift.output.text_report import TextReportGenerator

TODAY = date(2024, 6, 10)


@pytest.fixture
def snapshot():
    """Snapshot over a handful of records."""
    shifts = [
        ShiftRecord("sh-1", "org-1", "s-1", "c-1", TODAY, "09:00", "17:00", 30, "completed"),
        ShiftRecord("sh-2", "org-1", "s-2", "c-2", TODAY, "07:00", "06:00", 0, "scheduled"),
    ]
    appointments = [
        AppointmentRecord("a-1", "org-1", "c-1", date(2024, 6, 1), 150.0, "paid", "Home Care", 30.0),
    ]
    reminders = [
        ReminderRecord("r-1", "c-1", "Review care plan", TODAY - timedelta(days=2), "10:00"),
    ]
    staff = [StaffEarningsInput("s-1", "Alice Moore", 20.0)]
    return AnalyticsEngine().build_snapshot(
        shifts, appointments, reminders, staff, datetime(2024, 6, 10, 8, 0), "org-1"
    )


class TestTextReportGenerator:
    """Tests for TextReportGenerator."""

    def test_sections_present(self, snapshot):
        content = TextReportGenerator().generate_to_string(snapshot)

        assert "DASHBOARD ANALYTICS - 2024-06-10 (org-1)" in content
        for section in ("STAFF SHIFTS", "TOP EARNING STAFF", "MONTHLY REVENUE",
                        "REVENUE BY SERVICE", "SHIFT OUTCOMES", "REMINDERS"):
            assert section in content

    def test_figures(self, snapshot):
        content = TextReportGenerator().generate_to_string(snapshot)

        assert "Monthly Earnings: 150.00" in content
        assert "Alice Moore" in content
        assert "Overdue (1):" in content
        assert "Review care plan" in content

    def test_issues_listed(self, snapshot):
        content = TextReportGenerator().generate_to_string(snapshot)

        assert "RECORD ISSUES" in content
        assert "[reversed_span] shift sh-2:" in content
        assert "Excluded from totals: sh-2" in content

    def test_write_to_file(self, snapshot, tmp_path):
        path = tmp_path / "report.txt"
        content = TextReportGenerator().generate(snapshot, path)

        assert path.read_text(encoding="utf-8") == content


class TestPDFGenerator:
    """Tests for PDFGenerator."""

    def test_generate_to_buffer(self, snapshot):
        pytest.importorskip("reportlab")

        buffer = PDFGenerator().generate_to_buffer(snapshot)
        assert buffer.read(5) == b"%PDF-"

    def test_generate_file(self, snapshot, tmp_path):
        pytest.importorskip("reportlab")

        path = tmp_path / "dashboard.pdf"
        PDFGenerator().generate(snapshot, path)
        assert path.stat().st_size > 0

    def test_empty_snapshot(self, tmp_path):
        pytest.importorskip("reportlab")

        empty = AnalyticsEngine().build_snapshot([], [], [], [], TODAY)
        PDFGenerator().generate(empty, tmp_path / "empty.pdf")
        assert (tmp_path / "empty.pdf").exists()
