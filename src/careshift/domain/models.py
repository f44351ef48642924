"""Domain models for the analytics engine.

This module contains the read-only record types supplied by the persistence
layer (shifts, appointments, reminders, staff rates), the result types the
analytics produce, and the engine configuration.

Records are frozen snapshots: the engine never mutates or retains them
across calls.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional, Union

from careshift.exceptions import RecordFormatError

DEFAULT_SERVICE_TYPE = "Other"


class ShiftStatus(Enum):
    """Lifecycle status of a staff shift."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class PaymentStatus(Enum):
    """Payment status of an appointment."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class ReminderPriority(Enum):
    """Urgency of a client reminder."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ReminderStatus(Enum):
    """Status of a client reminder."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    SNOOZED = "snoozed"


# ---------------------------------------------------------------------------
# Row parsing helpers
# ---------------------------------------------------------------------------


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _lookup(row: dict, *names: str) -> Any:
    """Return the first non-missing value among snake_case/camelCase names."""
    for name in names:
        for key in (name, _camel(name)):
            if key in row:
                return row[key]
    return None


def _require(row: dict, record_type: str, *names: str) -> Any:
    value = _lookup(row, *names)
    if value is None:
        raise RecordFormatError(record_type, names[0])
    return value


def _to_date(value: Union[str, date, datetime], record_type: str, field_name: str) -> date:
    """Read a date from a date, datetime, or ISO date/timestamp string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise RecordFormatError(
                record_type, field_name, f"{record_type}.{field_name} is not an ISO date: {value!r}"
            ) from exc
    raise RecordFormatError(
        record_type, field_name, f"{record_type}.{field_name} has unsupported type {type(value).__name__}"
    )


def _to_float(value: Any, record_type: str, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RecordFormatError(
            record_type, field_name, f"{record_type}.{field_name} is not a number: {value!r}"
        ) from exc


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _status_value(value: Union[str, Enum]) -> str:
    if isinstance(value, Enum):
        return value.value
    return str(value).strip().lower()


def _isoformat(value: Any) -> Any:
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShiftRecord:
    """A staff shift for one organization.

    Attributes:
        id: Unique identifier of the shift.
        organization_id: Owning organization.
        staff_member_id: Assigned staff member, or None when unassigned.
        client_id: Client being cared for, if any.
        shift_date: Local calendar date of the shift.
        start_time: Local start time (``HH:MM[:SS]`` string or time).
        end_time: Local end time on the same calendar date.
        break_minutes: Unpaid break length in minutes.
        status: One of the ShiftStatus values, kept as its raw string.
        notes: Free-form notes.
    """

    id: str
    organization_id: str
    staff_member_id: Optional[str]
    client_id: Optional[str]
    shift_date: date
    start_time: Union[str, time]
    end_time: Union[str, time]
    break_minutes: float = 0
    status: str = ShiftStatus.SCHEDULED.value
    notes: Optional[str] = None

    @property
    def status_value(self) -> str:
        """Status normalized to its lowercase enum value."""
        return _status_value(self.status)

    def has_status(self, status: ShiftStatus) -> bool:
        """Check the shift status against an enum member."""
        return self.status_value == status.value

    @property
    def is_assigned(self) -> bool:
        """Whether a staff member is assigned to the shift."""
        return bool(self.staff_member_id)

    @classmethod
    def from_dict(cls, row: dict) -> "ShiftRecord":
        """Build a shift from a persistence row.

        Accepts snake_case or camelCase keys, and ``shift_date`` or ``date``
        for the calendar date.

        Raises:
            RecordFormatError: If a required field is missing.
        """
        name = cls.__name__
        break_value = _lookup(row, "break_minutes")
        return cls(
            id=str(_require(row, name, "id")),
            organization_id=str(_require(row, name, "organization_id")),
            staff_member_id=_optional_str(_lookup(row, "staff_member_id")),
            client_id=_optional_str(_lookup(row, "client_id")),
            shift_date=_to_date(_require(row, name, "shift_date", "date"), name, "shift_date"),
            start_time=_require(row, name, "start_time"),
            end_time=_require(row, name, "end_time"),
            break_minutes=_to_float(break_value, name, "break_minutes") if break_value is not None else 0,
            status=_status_value(_lookup(row, "status") or ShiftStatus.SCHEDULED.value),
            notes=_optional_str(_lookup(row, "notes")),
        )

    def to_dict(self) -> dict:
        return {f.name: _isoformat(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class AppointmentRecord:
    """A booked client appointment.

    Attributes:
        id: Unique identifier of the appointment.
        organization_id: Owning organization.
        client_id: Client who booked.
        appointment_date: Calendar date of the appointment.
        total_cost: Amount charged.
        payment_status: Raw payment status string.
        service_type: Service label, if recorded.
        hourly_rate: Rate charged per hour, if recorded.
    """

    id: str
    organization_id: str
    client_id: str
    appointment_date: date
    total_cost: float
    payment_status: str = PaymentStatus.PENDING.value
    service_type: Optional[str] = None
    hourly_rate: Optional[float] = None

    @property
    def is_paid(self) -> bool:
        return _status_value(self.payment_status) == PaymentStatus.PAID.value

    @classmethod
    def from_dict(cls, row: dict) -> "AppointmentRecord":
        """Build an appointment from a persistence row.

        Raises:
            RecordFormatError: If a required field is missing.
        """
        name = cls.__name__
        rate = _lookup(row, "hourly_rate")
        cost = _lookup(row, "total_cost")
        return cls(
            id=str(_require(row, name, "id")),
            organization_id=str(_require(row, name, "organization_id")),
            client_id=str(_require(row, name, "client_id")),
            appointment_date=_to_date(
                _require(row, name, "appointment_date"), name, "appointment_date"
            ),
            total_cost=_to_float(cost, name, "total_cost") if cost is not None else 0.0,
            payment_status=_status_value(
                _lookup(row, "payment_status") or PaymentStatus.PENDING.value
            ),
            service_type=_optional_str(_lookup(row, "service_type")),
            hourly_rate=_to_float(rate, name, "hourly_rate") if rate is not None else None,
        )

    def to_dict(self) -> dict:
        return {f.name: _isoformat(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class ReminderRecord:
    """A follow-up reminder attached to a client.

    Attributes:
        id: Unique identifier of the reminder.
        client_id: Client the reminder concerns.
        title: Short description.
        reminder_date: Calendar date the reminder is due.
        reminder_time: Optional time of day it is due.
        priority: Raw priority string (low, medium, high, urgent).
        status: Raw status string (pending, completed, cancelled, snoozed).
    """

    id: str
    client_id: str
    title: str
    reminder_date: date
    reminder_time: Optional[Union[str, time]] = None
    priority: str = ReminderPriority.MEDIUM.value
    status: str = ReminderStatus.PENDING.value

    @property
    def is_pending(self) -> bool:
        return _status_value(self.status) == ReminderStatus.PENDING.value

    @classmethod
    def from_dict(cls, row: dict) -> "ReminderRecord":
        """Build a reminder from a persistence row.

        Raises:
            RecordFormatError: If a required field is missing.
        """
        name = cls.__name__
        reminder_time = _lookup(row, "reminder_time")
        return cls(
            id=str(_require(row, name, "id")),
            client_id=str(_require(row, name, "client_id")),
            title=str(_lookup(row, "title") or ""),
            reminder_date=_to_date(_require(row, name, "reminder_date"), name, "reminder_date"),
            reminder_time=reminder_time if reminder_time not in (None, "") else None,
            priority=_status_value(_lookup(row, "priority") or ReminderPriority.MEDIUM.value),
            status=_status_value(_lookup(row, "status") or ReminderStatus.PENDING.value),
        )

    def to_dict(self) -> dict:
        return {f.name: _isoformat(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class StaffEarningsInput:
    """A staff member's display name and hourly rate.

    Attributes:
        staff_member_id: Staff member identifier, joined against shifts.
        display_name: Name shown in rankings.
        hourly_rate: Pay rate per hour (missing rates read as 0).
    """

    staff_member_id: str
    display_name: str
    hourly_rate: float = 0.0

    @classmethod
    def from_dict(cls, row: dict) -> "StaffEarningsInput":
        """Build a staff rate entry from a persistence row.

        The display name falls back to ``first_name last_name``.
        """
        name = cls.__name__
        display_name = _lookup(row, "display_name", "name")
        if not display_name:
            parts = [_lookup(row, "first_name") or "", _lookup(row, "last_name") or ""]
            display_name = " ".join(p for p in parts if p).strip()
        rate = _lookup(row, "hourly_rate")
        return cls(
            staff_member_id=str(_require(row, name, "staff_member_id", "id")),
            display_name=display_name or "",
            hourly_rate=_to_float(rate, name, "hourly_rate") if rate is not None else 0.0,
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StaffShiftSummary:
    """Per-staff shift totals.

    Attributes:
        staff_member_id: Staff member the totals belong to.
        shift_count: All shifts assigned to the staff member.
        today_count: Shifts dated today.
        week_count: Shifts dated within the rolling week (today included).
        total_hours: Net hours across every shift with usable times.
        skipped_count: Shifts left out of total_hours because of bad times.
    """

    staff_member_id: str
    shift_count: int
    today_count: int
    week_count: int
    total_hours: float
    skipped_count: int = 0

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ReminderBuckets:
    """Pending reminders split by urgency."""

    overdue: list[ReminderRecord] = field(default_factory=list)
    due_today: list[ReminderRecord] = field(default_factory=list)
    upcoming_week: list[ReminderRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.overdue) + len(self.due_today) + len(self.upcoming_week)

    def counts(self) -> dict[str, int]:
        return {
            "overdue": len(self.overdue),
            "due_today": len(self.due_today),
            "upcoming_week": len(self.upcoming_week),
        }

    def to_dict(self) -> dict:
        return {
            "overdue": [r.to_dict() for r in self.overdue],
            "due_today": [r.to_dict() for r in self.due_today],
            "upcoming_week": [r.to_dict() for r in self.upcoming_week],
        }


@dataclass(frozen=True)
class MonthlyRevenue:
    """Revenue for one calendar month."""

    month: str  # Sortable key, e.g. "2024-03"
    label: str  # Display label, e.g. "Mar"
    amount: float

    def to_dict(self) -> dict:
        return {"month": self.month, "label": self.label, "amount": self.amount}


@dataclass(frozen=True)
class ServiceRevenue:
    """Revenue for one service type and its share of the total."""

    service_type: str
    amount: float
    percentage: float

    def to_dict(self) -> dict:
        return {
            "service_type": self.service_type,
            "amount": self.amount,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class RevenueAnalytics:
    """Revenue views derived from paid appointments.

    Attributes:
        monthly: Chronological series, one point per month with revenue.
        by_service: Revenue per service type, largest first.
        average_hourly_rate: Mean of the recorded hourly rates.
        total_revenue: Sum of all paid appointment costs in the window.
        current_month_revenue: Revenue for the month containing "now".
        month_over_month_growth: Percent change against the previous entry.
    """

    monthly: list[MonthlyRevenue] = field(default_factory=list)
    by_service: list[ServiceRevenue] = field(default_factory=list)
    average_hourly_rate: float = 0.0
    total_revenue: float = 0.0
    current_month_revenue: float = 0.0
    month_over_month_growth: float = 0.0

    def to_dict(self) -> dict:
        return {
            "monthly": [m.to_dict() for m in self.monthly],
            "by_service": [s.to_dict() for s in self.by_service],
            "average_hourly_rate": self.average_hourly_rate,
            "total_revenue": self.total_revenue,
            "current_month_revenue": self.current_month_revenue,
            "month_over_month_growth": self.month_over_month_growth,
        }


@dataclass(frozen=True)
class StaffRankEntry:
    """Earnings of one staff member from completed shifts."""

    staff_member_id: str
    display_name: str
    shifts_completed: int
    total_earnings: float

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class PeakHour:
    """Number of shifts starting in a given hour of the day."""

    hour: int
    count: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.hour, self.count)

    def to_dict(self) -> dict:
        return {"hour": self.hour, "count": self.count}


@dataclass(frozen=True)
class ShiftStats:
    """Organization-wide shift outcome statistics.

    Cancellation and no-show figures are raw counts; callers derive rates
    themselves to avoid compounding rounding.
    """

    total_count: int = 0
    completed_count: int = 0
    cancelled_count: int = 0
    no_show_count: int = 0
    completion_rate: float = 0.0
    peak_hours: list[PeakHour] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_count": self.total_count,
            "completed_count": self.completed_count,
            "cancelled_count": self.cancelled_count,
            "no_show_count": self.no_show_count,
            "completion_rate": self.completion_rate,
            "peak_hours": [p.to_dict() for p in self.peak_hours],
        }


@dataclass(frozen=True)
class UpcomingShiftSummary:
    """Shift count and net hours over the rolling week."""

    count: int = 0
    total_hours: float = 0.0

    def to_dict(self) -> dict:
        return {"count": self.count, "total_hours": self.total_hours}


@dataclass
class AnalyticsConfig:
    """Configuration for the analytics engine.

    Attributes:
        window_months: Trailing months covered by revenue analytics.
        top_k: Number of staff returned by the earnings ranking.
        peak_hour_count: Number of peak start hours reported.
        upcoming_days: Length of the rolling week window in days.
        active_client_days: Look-back for counting active clients.
        today_shift_limit: Maximum shifts listed for today.
        default_service_type: Label for appointments without a service type.
        timezone: IANA zone used to resolve "today" from aware datetimes.
    """

    window_months: int = 6
    top_k: int = 5
    peak_hour_count: int = 3
    upcoming_days: int = 7
    active_client_days: int = 30
    today_shift_limit: int = 5
    default_service_type: str = DEFAULT_SERVICE_TYPE
    timezone: Optional[str] = None

    def __post_init__(self):
        if self.window_months < 1:
            raise ValueError("window_months must be at least 1")
        if self.top_k < 0 or self.peak_hour_count < 0 or self.today_shift_limit < 0:
            raise ValueError("top_k, peak_hour_count and today_shift_limit cannot be negative")
        if self.upcoming_days < 0 or self.active_client_days < 0:
            raise ValueError("day windows cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> "AnalyticsConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
