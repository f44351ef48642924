"""Time arithmetic shared by every aggregation.

All helpers work on local calendar dates and same-day times of day. Shifts
that cross midnight are not supported: a span whose end is before its start
is reported as invalid instead of being wrapped to the next day.
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo

from careshift.exceptions import InvalidShiftTimeError

TimeLike = Union[str, time]
DateLike = Union[date, datetime]

WEEK_HORIZON_DAYS = 7


class DateBucket(Enum):
    """Position of a calendar date relative to a reference "now"."""

    OVERDUE = "overdue"  # Before today
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"  # Within [today, today + 7 days]
    FUTURE = "future"  # Beyond the week horizon


def parse_time(value: TimeLike) -> time:
    """Parse a time of day.

    Args:
        value: A ``datetime.time`` or a string in ``HH:MM`` or ``HH:MM:SS`` form.

    Returns:
        The parsed time.

    Raises:
        InvalidShiftTimeError: If the value cannot be read as a time of day.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidShiftTimeError(f"Expected a time string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise InvalidShiftTimeError(f"Malformed time string: {value!r}")
    try:
        hour = int(parts[0])
        minute = int(parts[1])
        # Postgres "time" columns may carry fractional seconds
        second = int(float(parts[2])) if len(parts) == 3 else 0
        return time(hour=hour, minute=minute, second=second)
    except (ValueError, OverflowError) as exc:
        raise InvalidShiftTimeError(f"Malformed time string: {value!r}") from exc


def minutes_of_day(value: TimeLike) -> float:
    """Minutes from midnight for a time of day."""
    t = parse_time(value)
    return t.hour * 60 + t.minute + t.second / 60.0


def span_minutes(start: TimeLike, end: TimeLike) -> float:
    """Minutes between two times on the same day.

    Raises:
        InvalidShiftTimeError: If either time is malformed or end is before start.
    """
    start_minutes = minutes_of_day(start)
    end_minutes = minutes_of_day(end)
    if end_minutes < start_minutes:
        raise InvalidShiftTimeError(
            f"Shift ends before it starts ({start} - {end}); overnight shifts are not supported"
        )
    return end_minutes - start_minutes


def net_hours(start: TimeLike, end: TimeLike, break_minutes: float = 0) -> float:
    """Worked hours for a same-day shift after subtracting its break.

    The result is floored at zero when the break is longer than the shift.

    Args:
        start: Shift start time.
        end: Shift end time (same calendar date as start).
        break_minutes: Unpaid break length in minutes.

    Returns:
        Net hours, never negative.

    Raises:
        InvalidShiftTimeError: For malformed times, a reversed span, or a
            negative break.
    """
    if break_minutes is None:
        break_minutes = 0
    if break_minutes < 0:
        raise InvalidShiftTimeError(f"Break minutes cannot be negative: {break_minutes}")

    worked = span_minutes(start, end) - break_minutes
    return max(0.0, worked) / 60.0


def start_hour(start: TimeLike) -> int:
    """Hour-of-day component (0-23) of a start time."""
    return parse_time(start).hour


def local_today(now: DateLike, timezone: Optional[str] = None) -> date:
    """Resolve the organization's local calendar date for a reference time.

    Args:
        now: Reference date or datetime supplied by the caller.
        timezone: Optional IANA zone name. Only applied to timezone-aware
            datetimes; naive datetimes are taken to be local already.
    """
    if isinstance(now, datetime):
        if timezone and now.tzinfo is not None:
            now = now.astimezone(ZoneInfo(timezone))
        return now.date()
    return now


def classify_date(
    d: date,
    now: DateLike,
    timezone: Optional[str] = None,
    horizon_days: int = WEEK_HORIZON_DAYS,
) -> DateBucket:
    """Classify a date relative to today.

    "Today" is calendar-date equality, not wall-clock distance. The week is a
    rolling window ``[today, today + horizon_days]`` inclusive of both ends.
    """
    today = local_today(now, timezone)
    if d == today:
        return DateBucket.TODAY
    if d < today:
        return DateBucket.OVERDUE
    if d == today + timedelta(days=1) and horizon_days >= 1:
        return DateBucket.TOMORROW
    if d <= today + timedelta(days=horizon_days):
        return DateBucket.THIS_WEEK
    return DateBucket.FUTURE


def is_within_week(bucket: DateBucket) -> bool:
    """True for buckets inside the rolling week window."""
    return bucket in (DateBucket.TODAY, DateBucket.TOMORROW, DateBucket.THIS_WEEK)


def month_key(d: DateLike) -> str:
    """Sortable month key, e.g. ``"2024-03"``."""
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: DateLike) -> str:
    """Short month name for display, e.g. ``"Mar"``."""
    return d.strftime("%b")


def add_months(d: date, months: int) -> date:
    """First day of the month ``months`` away from the month of ``d``."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    return date(year, month + 1, 1)


def window_start(now: DateLike, window_months: int, timezone: Optional[str] = None) -> date:
    """First day of the trailing window covering ``window_months`` months.

    The current month counts as the first month of the window, so a six month
    window starting in June begins on January 1st.
    """
    today = local_today(now, timezone)
    return add_months(today, -(max(1, window_months) - 1))
