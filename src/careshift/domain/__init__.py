"""Domain models and time arithmetic for the analytics engine."""

from careshift.domain.models import (
    AnalyticsConfig,
    AppointmentRecord,
    MonthlyRevenue,
    PaymentStatus,
    PeakHour,
    ReminderBuckets,
    ReminderPriority,
    ReminderRecord,
    ReminderStatus,
    RevenueAnalytics,
    ServiceRevenue,
    ShiftRecord,
    ShiftStats,
    ShiftStatus,
    StaffEarningsInput,
    StaffRankEntry,
    StaffShiftSummary,
    UpcomingShiftSummary,
)
from careshift.domain.timeutils import (
    DateBucket,
    classify_date,
    local_today,
    month_key,
    month_label,
    net_hours,
    parse_time,
)

__all__ = [
    # Records
    "AppointmentRecord",
    "ReminderRecord",
    "ShiftRecord",
    "StaffEarningsInput",
    # Statuses
    "PaymentStatus",
    "ReminderPriority",
    "ReminderStatus",
    "ShiftStatus",
    # Results
    "MonthlyRevenue",
    "PeakHour",
    "ReminderBuckets",
    "RevenueAnalytics",
    "ServiceRevenue",
    "ShiftStats",
    "StaffRankEntry",
    "StaffShiftSummary",
    "UpcomingShiftSummary",
    # Configuration
    "AnalyticsConfig",
    # Time arithmetic
    "DateBucket",
    "classify_date",
    "local_today",
    "month_key",
    "month_label",
    "net_hours",
    "parse_time",
]
