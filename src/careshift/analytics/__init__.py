"""Aggregations and derived analytics over shift, appointment and reminder records."""

from careshift.analytics.client_activity import (
    ClientActivity,
    count_active_clients,
    summarize_upcoming_week,
    todays_shifts,
)
from careshift.analytics.engine import AnalyticsEngine, DashboardSnapshot
from careshift.analytics.ranking import StaffRanker, rank_top_staff
from careshift.analytics.reminders import ReminderBucketer, bucket_reminders
from careshift.analytics.revenue import RevenueAnalyzer, compute_revenue_analytics
from careshift.analytics.shift_aggregator import ShiftAggregator, aggregate_shifts_by_staff
from careshift.analytics.shift_stats import ShiftStatsEngine, compute_shift_stats

__all__ = [
    # Engine
    "AnalyticsEngine",
    "DashboardSnapshot",
    # Aggregators
    "ClientActivity",
    "ReminderBucketer",
    "RevenueAnalyzer",
    "ShiftAggregator",
    "ShiftStatsEngine",
    "StaffRanker",
    # Functional entry points
    "aggregate_shifts_by_staff",
    "bucket_reminders",
    "compute_revenue_analytics",
    "compute_shift_stats",
    "count_active_clients",
    "rank_top_staff",
    "summarize_upcoming_week",
    "todays_shifts",
]
