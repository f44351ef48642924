"""Plain-text dashboard report.

This module renders a DashboardSnapshot as fixed-width text showing:
- Headline figures (earnings, shifts, clients, rates)
- Per-staff shift totals and the earnings ranking
- Revenue by month and by service
- Peak start hours and reminder buckets
"""

from pathlib import Path
from typing import Union

from careshift.analytics.engine import DashboardSnapshot
from careshift.domain.models import ReminderRecord

RULE_WIDTH = 80


class TextReportGenerator:
    """Generates a text report of a dashboard snapshot.

    Example:
        >>> generator = TextReportGenerator()
        >>> print(generator.generate_to_string(snapshot))
    """

    def generate(self, snapshot: DashboardSnapshot, output_path: Union[str, Path]) -> str:
        """Generate the report and save it to a file.

        Args:
            snapshot: The snapshot to render.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(snapshot)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(self, snapshot: DashboardSnapshot) -> str:
        """Generate the report and return it as a string."""
        return self._generate_content(snapshot)

    def _generate_content(self, snapshot: DashboardSnapshot) -> str:
        lines = []

        lines.append("=" * RULE_WIDTH)
        title = f"DASHBOARD ANALYTICS - {snapshot.generated_for.isoformat()}"
        if snapshot.organization_id:
            title += f" ({snapshot.organization_id})"
        lines.append(title)
        lines.append("=" * RULE_WIDTH)
        lines.append("")

        lines.append(f"Monthly Earnings: {snapshot.monthly_earnings:,.2f}")
        lines.append(f"Growth vs Previous Month: {snapshot.revenue.month_over_month_growth:+.1f}%")
        lines.append(f"Total Shifts: {snapshot.total_shifts}")
        lines.append(f"Active Clients (30 days): {snapshot.active_clients}")
        lines.append(f"Average Hourly Rate: {snapshot.average_hourly_rate:,.2f}")
        lines.append(
            f"Next 7 Days: {snapshot.upcoming_week.count} shifts, "
            f"{snapshot.upcoming_week.total_hours:.1f}h"
        )
        lines.append("")

        self._section(lines, "STAFF SHIFTS")
        lines.append(f"{'Staff':<24} {'Shifts':>7} {'Today':>6} {'Week':>6} {'Hours':>8}")
        for summary in snapshot.staff_summaries:
            lines.append(
                f"{summary.staff_member_id[:24]:<24} {summary.shift_count:>7} "
                f"{summary.today_count:>6} {summary.week_count:>6} {summary.total_hours:>8.1f}"
            )
        if not snapshot.staff_summaries:
            lines.append("No assigned shifts.")
        lines.append("")

        self._section(lines, "TOP EARNING STAFF")
        for rank, entry in enumerate(snapshot.top_staff, 1):
            name = entry.display_name or entry.staff_member_id
            lines.append(
                f"{rank:>2}. {name[:28]:<28} {entry.shifts_completed:>4} shifts "
                f"{entry.total_earnings:>12,.2f}"
            )
        if not snapshot.top_staff:
            lines.append("No completed shifts.")
        lines.append("")

        self._section(lines, "MONTHLY REVENUE")
        peak = max((m.amount for m in snapshot.revenue.monthly), default=0.0)
        for point in snapshot.revenue.monthly:
            bar = "#" * int(round(point.amount / peak * 40)) if peak > 0 else ""
            lines.append(f"{point.label} {point.month[:4]}: {bar} ({point.amount:,.2f})")
        if not snapshot.revenue.monthly:
            lines.append("No paid appointments.")
        lines.append("")

        self._section(lines, "REVENUE BY SERVICE")
        for service in snapshot.revenue.by_service:
            lines.append(
                f"{service.service_type[:30]:<30} {service.amount:>12,.2f} {service.percentage:>6.1f}%"
            )
        lines.append("")

        self._section(lines, "SHIFT OUTCOMES")
        stats = snapshot.shift_stats
        lines.append(f"Completion Rate: {stats.completion_rate:.1f}%")
        lines.append(f"Completed: {stats.completed_count}")
        lines.append(f"Cancelled: {stats.cancelled_count}")
        lines.append(f"No-shows: {stats.no_show_count}")
        peaks = ", ".join(f"{p.hour:02d}:00 ({p.count})" for p in stats.peak_hours)
        lines.append(f"Peak Start Hours: {peaks or '-'}")
        lines.append("")

        self._section(lines, "TODAY'S SHIFTS")
        for shift in snapshot.todays_shifts:
            staff = shift.staff_member_id or "Unassigned"
            lines.append(f"{str(shift.start_time):>8}-{str(shift.end_time):<8} {staff:<20} {shift.status}")
        if not snapshot.todays_shifts:
            lines.append("No shifts today.")
        lines.append("")

        self._section(lines, "REMINDERS")
        for label, bucket in (
            ("Overdue", snapshot.reminders.overdue),
            ("Due Today", snapshot.reminders.due_today),
            ("Upcoming", snapshot.reminders.upcoming_week),
        ):
            lines.append(f"{label} ({len(bucket)}):")
            for reminder in bucket:
                lines.append(f"  {self._reminder_line(reminder)}")
        lines.append("")

        if snapshot.issues:
            self._section(lines, "RECORD ISSUES")
            for issue in snapshot.issues:
                lines.append(f"  - {issue}")
            if snapshot.excluded_shift_ids:
                lines.append(f"Excluded from totals: {', '.join(snapshot.excluded_shift_ids)}")
            lines.append("")

        lines.append("=" * RULE_WIDTH)
        return "\n".join(lines)

    @staticmethod
    def _section(lines: list[str], title: str) -> None:
        lines.append("-" * RULE_WIDTH)
        lines.append(title)
        lines.append("-" * RULE_WIDTH)

    @staticmethod
    def _reminder_line(reminder: ReminderRecord) -> str:
        when = reminder.reminder_date.isoformat()
        if reminder.reminder_time is not None:
            when += f" {reminder.reminder_time}"
        return f"[{reminder.priority}] {when} {reminder.title} (client {reminder.client_id})"
