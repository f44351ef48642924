"""Revenue analytics over paid appointments.

Months with no paid appointments are not synthesized as zero entries, so the
month-over-month growth compares against the previous month that actually
had revenue.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Union

from careshift.domain.models import (
    AnalyticsConfig,
    AppointmentRecord,
    MonthlyRevenue,
    RevenueAnalytics,
    ServiceRevenue,
)
from careshift.domain.timeutils import local_today, month_key, month_label, window_start


def percentage_of(part: float, total: float) -> float:
    """Share of a total in percent, 0 when the total is 0."""
    if total == 0:
        return 0.0
    return part / total * 100.0


def growth_percentage(current: float, previous: float) -> float:
    """Percent change from previous to current, 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100.0


class RevenueAnalyzer:
    """Derives revenue views from paid appointments.

    Example:
        >>> analyzer = RevenueAnalyzer(AnalyticsConfig(window_months=6))
        >>> analytics = analyzer.analyze(appointments, now=date(2024, 6, 15))
        >>> [m.label for m in analytics.monthly]
        ['Apr', 'Jun']
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or AnalyticsConfig()

    def analyze(
        self,
        appointments: Iterable[AppointmentRecord],
        now: Union[date, datetime],
        window_months: Optional[int] = None,
    ) -> RevenueAnalytics:
        """Compute revenue analytics.

        Args:
            appointments: Appointment records. Unpaid records and records
                dated before the window are ignored.
            now: Reference time; its month is the "current" month.
            window_months: Trailing months to include (defaults to config).

        Returns:
            RevenueAnalytics with zeroed fields when nothing qualifies.
        """
        months = window_months if window_months is not None else self.config.window_months
        since = window_start(now, months, self.config.timezone)
        records = [
            a for a in appointments
            if a.is_paid and a.appointment_date >= since
        ]

        monthly = self.monthly_series(records)
        by_service = self.revenue_by_service(records)

        current_key = month_key(local_today(now, self.config.timezone))
        current = 0.0
        previous = 0.0
        for point in monthly:
            if point.month < current_key:
                previous = point.amount
            elif point.month == current_key:
                current = point.amount

        return RevenueAnalytics(
            monthly=monthly,
            by_service=by_service,
            average_hourly_rate=self.average_hourly_rate(records),
            total_revenue=sum(a.total_cost for a in records),
            current_month_revenue=current,
            month_over_month_growth=growth_percentage(current, previous),
        )

    def monthly_series(self, appointments: Iterable[AppointmentRecord]) -> list[MonthlyRevenue]:
        """Revenue per month, chronological, one point per month with records."""
        totals: dict[str, float] = defaultdict(float)
        labels: dict[str, str] = {}
        for appt in appointments:
            key = month_key(appt.appointment_date)
            totals[key] += appt.total_cost
            labels[key] = month_label(appt.appointment_date)

        return [
            MonthlyRevenue(month=key, label=labels[key], amount=totals[key])
            for key in sorted(totals)
        ]

    def revenue_by_service(self, appointments: Iterable[AppointmentRecord]) -> list[ServiceRevenue]:
        """Revenue per service type with its share of the total.

        Sorted by amount (descending), then service type.
        """
        totals: dict[str, float] = defaultdict(float)
        for appt in appointments:
            service = appt.service_type or self.config.default_service_type
            totals[service] += appt.total_cost

        grand_total = sum(totals.values())
        breakdown = [
            ServiceRevenue(
                service_type=service,
                amount=amount,
                percentage=percentage_of(amount, grand_total),
            )
            for service, amount in totals.items()
        ]
        breakdown.sort(key=lambda s: (-s.amount, s.service_type))
        return breakdown

    @staticmethod
    def average_hourly_rate(appointments: Iterable[AppointmentRecord]) -> float:
        """Mean hourly rate over records that have one."""
        rates = [a.hourly_rate for a in appointments if a.hourly_rate is not None]
        if not rates:
            return 0.0
        return sum(rates) / len(rates)


def compute_revenue_analytics(
    appointments: Iterable[AppointmentRecord],
    now: Union[date, datetime],
    window_months: int = 6,
    config: Optional[AnalyticsConfig] = None,
) -> RevenueAnalytics:
    """Compute revenue analytics over a trailing window of months."""
    return RevenueAnalyzer(config).analyze(appointments, now, window_months=window_months)
