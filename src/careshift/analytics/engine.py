"""Dashboard analytics engine.

This module provides the high-level AnalyticsEngine that runs every
aggregation over one organization's records and collects the results into a
single DashboardSnapshot.

The engine holds no state between calls. Callers re-run it whenever their
records change and replace the previous snapshot.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from careshift.analytics.client_activity import ClientActivity
from careshift.analytics.ranking import StaffRanker
from careshift.analytics.reminders import ReminderBucketer
from careshift.analytics.revenue import RevenueAnalyzer
from careshift.analytics.shift_aggregator import ShiftAggregator
from careshift.analytics.shift_stats import ShiftStatsEngine
from careshift.domain.models import (
    AnalyticsConfig,
    AppointmentRecord,
    ReminderBuckets,
    ReminderRecord,
    RevenueAnalytics,
    ShiftRecord,
    ShiftStats,
    ShiftStatus,
    StaffEarningsInput,
    StaffRankEntry,
    StaffShiftSummary,
    UpcomingShiftSummary,
)
from careshift.domain.timeutils import local_today, window_start
from careshift.sources import RecordSource
from careshift.validation.validator import RecordIssue, RecordValidator

logger = logging.getLogger(__name__)


@dataclass
class DashboardSnapshot:
    """Every dashboard view for one organization at one reference time.

    Attributes:
        generated_for: The local date the snapshot was computed for.
        organization_id: Organization the records belong to, if known.
        total_shifts: All shifts supplied, including unassigned ones.
        active_clients: Distinct clients with a recent appointment.
        staff_summaries: Per-staff shift counts and hours.
        reminders: Pending reminders by urgency.
        revenue: Revenue analytics over paid appointments.
        top_staff: Top earners from completed shifts.
        shift_stats: Completion rate, outcome counts and peak hours.
        upcoming_week: Shift count and hours over the rolling week.
        todays_shifts: Today's shifts, earliest first.
        issues: Record problems found while computing the snapshot.
        excluded_shift_ids: Shifts left out of hour and earnings totals.
    """

    generated_for: date
    organization_id: Optional[str] = None
    total_shifts: int = 0
    active_clients: int = 0
    staff_summaries: list[StaffShiftSummary] = field(default_factory=list)
    reminders: ReminderBuckets = field(default_factory=ReminderBuckets)
    revenue: RevenueAnalytics = field(default_factory=RevenueAnalytics)
    top_staff: list[StaffRankEntry] = field(default_factory=list)
    shift_stats: ShiftStats = field(default_factory=ShiftStats)
    upcoming_week: UpcomingShiftSummary = field(default_factory=UpcomingShiftSummary)
    todays_shifts: list[ShiftRecord] = field(default_factory=list)
    issues: list[RecordIssue] = field(default_factory=list)
    excluded_shift_ids: list[str] = field(default_factory=list)

    @property
    def monthly_earnings(self) -> float:
        """Revenue for the current month."""
        return self.revenue.current_month_revenue

    @property
    def average_hourly_rate(self) -> float:
        return self.revenue.average_hourly_rate

    def to_dict(self) -> dict:
        """JSON-ready representation with ISO dates."""
        return {
            "generated_for": self.generated_for.isoformat(),
            "organization_id": self.organization_id,
            "total_shifts": self.total_shifts,
            "active_clients": self.active_clients,
            "monthly_earnings": self.monthly_earnings,
            "average_hourly_rate": self.average_hourly_rate,
            "staff_summaries": [s.to_dict() for s in self.staff_summaries],
            "reminders": self.reminders.to_dict(),
            "revenue": self.revenue.to_dict(),
            "top_staff": [s.to_dict() for s in self.top_staff],
            "shift_stats": self.shift_stats.to_dict(),
            "upcoming_week": self.upcoming_week.to_dict(),
            "todays_shifts": [s.to_dict() for s in self.todays_shifts],
            "issues": [i.to_dict() for i in self.issues],
            "excluded_shift_ids": list(self.excluded_shift_ids),
        }


class AnalyticsEngine:
    """High-level engine for computing dashboard analytics.

    The engine coordinates the individual aggregators so a caller can get
    every dashboard figure from one call.

    Example:
        >>> engine = AnalyticsEngine()
        >>> snapshot = engine.build_snapshot(
        ...     shifts=shifts,
        ...     appointments=appointments,
        ...     reminders=reminders,
        ...     staff_rates=staff,
        ...     now=datetime(2024, 6, 10, 9, 0),
        ... )
        >>> snapshot.shift_stats.completion_rate
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        """Initialize the engine and its aggregators.

        Args:
            config: Engine configuration shared by every aggregator.
        """
        self.config = config or AnalyticsConfig()

        self.shift_aggregator = ShiftAggregator(self.config)
        self.reminder_bucketer = ReminderBucketer(self.config)
        self.revenue_analyzer = RevenueAnalyzer(self.config)
        self.staff_ranker = StaffRanker(self.config)
        self.shift_stats_engine = ShiftStatsEngine(self.config)
        self.client_activity = ClientActivity(self.config)
        self.validator = RecordValidator()

    def build_snapshot(
        self,
        shifts: Iterable[ShiftRecord],
        appointments: Iterable[AppointmentRecord],
        reminders: Iterable[ReminderRecord],
        staff_rates: Iterable[StaffEarningsInput],
        now: Union[date, datetime],
        organization_id: Optional[str] = None,
        recent_appointments: Optional[Iterable[AppointmentRecord]] = None,
    ) -> DashboardSnapshot:
        """Compute every dashboard view.

        Args:
            shifts: All shifts for the organization (any status).
            appointments: Appointments; only paid ones count toward revenue.
            reminders: Reminders; only pending ones are bucketed.
            staff_rates: Staff display names and hourly rates.
            now: Reference time, passed explicitly for reproducible output.
            organization_id: Organization the records belong to.
            recent_appointments: Appointments of any payment status used for
                the active client count (defaults to ``appointments``).

        Returns:
            DashboardSnapshot with every view filled in.
        """
        shifts = list(shifts)
        appointments = list(appointments)
        reminders = list(reminders)
        staff_rates = list(staff_rates)
        recent = list(recent_appointments) if recent_appointments is not None else appointments

        validation = self.validator.validate_shifts(shifts, staff_rates)
        self.validator.validate_appointments(appointments, validation)
        self.validator.validate_reminders(reminders, validation)
        self.validator.validate_staff(staff_rates, validation)
        excluded = sorted(validation.excluded_ids("shift"))
        if not validation.is_valid:
            logger.warning(
                "%d shift(s) excluded from totals for organization %s",
                len(excluded),
                organization_id or "<unknown>",
            )

        completed = [s for s in shifts if s.has_status(ShiftStatus.COMPLETED)]

        return DashboardSnapshot(
            generated_for=local_today(now, self.config.timezone),
            organization_id=organization_id,
            total_shifts=len(shifts),
            active_clients=self.client_activity.count_active_clients(recent, now),
            staff_summaries=self.shift_aggregator.aggregate(shifts, now),
            reminders=self.reminder_bucketer.bucket(reminders, now),
            revenue=self.revenue_analyzer.analyze(appointments, now),
            top_staff=self.staff_ranker.rank(completed, staff_rates),
            shift_stats=self.shift_stats_engine.compute(shifts),
            upcoming_week=self.client_activity.summarize_upcoming_week(shifts, now),
            todays_shifts=self.client_activity.todays_shifts(shifts, now),
            issues=validation.issues + validation.warnings,
            excluded_shift_ids=excluded,
        )

    def build_for_organization(
        self,
        source: RecordSource,
        organization_id: str,
        now: Union[date, datetime],
    ) -> DashboardSnapshot:
        """Fetch an organization's records from a source and build its snapshot.

        Args:
            source: Record source for the persistence layer.
            organization_id: Organization to report on.
            now: Reference time.
        """
        today = local_today(now, self.config.timezone)
        revenue_since = window_start(now, self.config.window_months, self.config.timezone)
        clients_since = today - timedelta(days=self.config.active_client_days)

        logger.info("Building dashboard for organization %s as of %s", organization_id, today)

        return self.build_snapshot(
            shifts=source.list_shifts_for_org(organization_id),
            appointments=source.list_paid_appointments_for_org(organization_id, revenue_since),
            reminders=source.list_pending_reminders_for_org(organization_id),
            staff_rates=source.list_staff_with_rates(organization_id),
            now=now,
            organization_id=organization_id,
            recent_appointments=source.list_recent_appointments_for_org(
                organization_id, clients_since
            ),
        )
