"""PDF generation for dashboard analytics.

This module creates a printable PDF report showing:
- Headline figures and shift outcomes
- Monthly revenue and revenue-by-service charts
- Staff shift totals and the earnings ranking
- Reminder buckets
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from careshift.analytics.engine import DashboardSnapshot

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "revenue": (0.4, 0.6, 0.8),  # Blue
    "overdue": (0.85, 0.35, 0.35),  # Red
    "due_today": (0.95, 0.7, 0.3),  # Orange
    "upcoming": (0.4, 0.7, 0.4),  # Green
    "row_shade": (0.95, 0.95, 0.95),  # Light gray
}

SERVICE_PALETTE = [
    (0.4, 0.6, 0.8),
    (0.4, 0.7, 0.4),
    (0.8, 0.6, 0.2),
    (0.7, 0.4, 0.7),
    (0.6, 0.6, 0.6),
    (0.9, 0.7, 0.7),
]


def _require_reportlab():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class PDFGenerator:
    """Generates printable PDF dashboard reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(snapshot, "dashboard.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(self, snapshot: DashboardSnapshot, output_path: Union[str, Path]) -> None:
        """Generate the PDF report and save it to a file.

        Args:
            snapshot: The dashboard snapshot to render.
            output_path: Path to save the PDF.
        """
        canvas, pagesize = _require_reportlab()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw_pages(c, snapshot)
        c.save()

    def generate_to_buffer(self, snapshot: DashboardSnapshot) -> BytesIO:
        """Generate the PDF report and return it as a bytes buffer."""
        canvas, pagesize = _require_reportlab()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw_pages(c, snapshot)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw_pages(self, c, snapshot: DashboardSnapshot) -> None:
        self._draw_overview_page(c, snapshot)
        self._draw_staff_page(c, snapshot)

    def _draw_header(self, c, snapshot: DashboardSnapshot, title: str) -> None:
        """Draw page header with date and title."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"{title} - {snapshot.generated_for.strftime('%A, %B %d, %Y')}",
        )
        if snapshot.organization_id:
            c.setFont("Helvetica", 10)
            c.drawString(
                self.margin,
                self.page_height - self.margin - 35,
                f"Organization: {snapshot.organization_id}",
            )

    def _draw_overview_page(self, c, snapshot: DashboardSnapshot) -> None:
        """Draw headline figures, revenue charts and shift outcomes."""
        self._draw_header(c, snapshot, "Dashboard Analytics")

        y = self.page_height - self.margin - 65
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        stats = snapshot.shift_stats
        peaks = ", ".join(f"{p.hour:02d}:00 ({p.count})" for p in stats.peak_hours) or "-"
        figures = [
            f"Monthly Earnings: {snapshot.monthly_earnings:,.2f} "
            f"({snapshot.revenue.month_over_month_growth:+.1f}% vs previous month)",
            f"Total Shifts: {snapshot.total_shifts}",
            f"Active Clients (30 days): {snapshot.active_clients}",
            f"Average Hourly Rate: {snapshot.average_hourly_rate:,.2f}",
            f"Completion Rate: {stats.completion_rate:.1f}%  "
            f"(cancelled {stats.cancelled_count}, no-show {stats.no_show_count})",
            f"Peak Start Hours: {peaks}",
            f"Next 7 Days: {snapshot.upcoming_week.count} shifts, "
            f"{snapshot.upcoming_week.total_hours:.1f}h",
        ]
        c.setFont("Helvetica", 10)
        for line in figures:
            c.drawString(self.margin + 20, y, line)
            y -= 15

        # Monthly revenue chart
        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Monthly Revenue")
        self._draw_revenue_chart(c, snapshot, self.margin + 20, y - 170, 320, 150)

        # Revenue by service
        legend_x = self.margin + 400
        c.setFont("Helvetica-Bold", 12)
        c.drawString(legend_x, y, "Revenue by Service")
        self._draw_service_bar(c, snapshot, legend_x, y - 30, 300, 14)

        self._draw_reminder_counts(c, snapshot, legend_x, y - 120)

        c.showPage()

    def _draw_revenue_chart(
        self,
        c,
        snapshot: DashboardSnapshot,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw a bar chart of monthly revenue."""
        monthly = snapshot.revenue.monthly
        if not monthly:
            c.setFont("Helvetica", 9)
            c.drawString(x, y + height / 2, "No paid appointments in the window.")
            return

        max_amount = max(m.amount for m in monthly) or 1
        bar_width = width / len(monthly)

        # Draw axes
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(1)
        c.line(x, y, x, y + height)  # Y axis
        c.line(x, y, x + width, y)  # X axis

        c.setFont("Helvetica", 7)
        for i, point in enumerate(monthly):
            bar_height = (point.amount / max_amount) * height
            bar_x = x + i * bar_width
            c.setFillColorRGB(*COLORS["revenue"])
            c.rect(bar_x + 2, y, bar_width - 4, bar_height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(bar_x + bar_width / 2, y - 12, point.label)

        c.drawRightString(x - 5, y, "0")
        c.drawRightString(x - 5, y + height - 5, f"{max_amount:,.0f}")

    def _draw_service_bar(
        self,
        c,
        snapshot: DashboardSnapshot,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw a stacked bar of service shares with a legend below it."""
        services = snapshot.revenue.by_service
        if not services:
            c.setFont("Helvetica", 9)
            c.drawString(x, y, "No revenue recorded.")
            return

        current_x = x
        for i, service in enumerate(services):
            seg_w = width * service.percentage / 100.0
            c.setFillColorRGB(*SERVICE_PALETTE[i % len(SERVICE_PALETTE)])
            c.rect(current_x, y, seg_w, height, fill=1, stroke=0)
            current_x += seg_w

        c.setFont("Helvetica", 8)
        legend_y = y - 15
        for i, service in enumerate(services[:6]):
            c.setFillColorRGB(*SERVICE_PALETTE[i % len(SERVICE_PALETTE)])
            c.rect(x, legend_y - 2, 10, 8, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(
                x + 15, legend_y,
                f"{service.service_type[:24]}: {service.amount:,.2f} ({service.percentage:.1f}%)",
            )
            legend_y -= 12

    def _draw_reminder_counts(self, c, snapshot: DashboardSnapshot, x: float, y: float) -> None:
        """Draw reminder bucket counts."""
        c.setFont("Helvetica-Bold", 12)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(x, y, "Reminders")
        y -= 18

        counts = snapshot.reminders.counts()
        items = [
            ("overdue", "Overdue", counts["overdue"]),
            ("due_today", "Due Today", counts["due_today"]),
            ("upcoming", "Upcoming (7 days)", counts["upcoming_week"]),
        ]
        c.setFont("Helvetica", 9)
        for key, label, count in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(x + 18, y, f"{label}: {count}")
            y -= 15

    def _draw_staff_page(self, c, snapshot: DashboardSnapshot) -> None:
        """Draw staff shift totals and the earnings ranking."""
        self._draw_header(c, snapshot, "Staff")

        row_height = 14
        y = self.page_height - self.margin - 65

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Top Earning Staff")
        y -= row_height + 4
        c.setFont("Helvetica", 9)
        for rank, entry in enumerate(snapshot.top_staff, 1):
            name = entry.display_name or entry.staff_member_id
            c.drawString(self.margin + 20, y, f"{rank}. {name[:30]}")
            c.drawRightString(self.margin + 300, y, f"{entry.shifts_completed} shifts")
            c.drawRightString(self.margin + 400, y, f"{entry.total_earnings:,.2f}")
            y -= row_height

        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Shifts by Staff Member")
        y -= row_height + 4

        columns = [("Staff", 0), ("Shifts", 220), ("Today", 280), ("Week", 340), ("Hours", 410)]
        c.setFont("Helvetica-Bold", 9)
        for label, offset in columns:
            c.drawString(self.margin + 20 + offset, y, label)
        y -= row_height

        c.setFont("Helvetica", 9)
        for i, summary in enumerate(snapshot.staff_summaries):
            if y < self.margin + 20:
                c.showPage()
                self._draw_header(c, snapshot, "Staff (continued)")
                y = self.page_height - self.margin - 65
                c.setFont("Helvetica", 9)

            if i % 2 == 0:
                c.setFillColorRGB(*COLORS["row_shade"])
                c.rect(self.margin + 15, y - 3, 460, row_height, fill=1, stroke=0)
                c.setFillColorRGB(0, 0, 0)

            values = [
                summary.staff_member_id[:32],
                str(summary.shift_count),
                str(summary.today_count),
                str(summary.week_count),
                f"{summary.total_hours:.1f}",
            ]
            for (_, offset), value in zip(columns, values):
                c.drawString(self.margin + 20 + offset, y, value)
            y -= row_height

        c.showPage()
