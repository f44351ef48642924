"""Per-staff shift aggregation.

Groups a flat list of shifts by staff member and produces shift counts for
today and the rolling week, along with cumulative net hours.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Union

from careshift.domain.models import AnalyticsConfig, ShiftRecord, StaffShiftSummary
from careshift.domain.timeutils import (
    DateBucket,
    classify_date,
    is_within_week,
    net_hours,
)
from careshift.exceptions import InvalidShiftTimeError

logger = logging.getLogger(__name__)


class ShiftAggregator:
    """Builds per-staff shift summaries.

    Unassigned shifts are left out of the per-staff grouping. A shift with
    unusable times still counts toward its staff member's shift totals but
    contributes no hours.

    Example:
        >>> aggregator = ShiftAggregator()
        >>> summaries = aggregator.aggregate(shifts, now=datetime(2024, 6, 10, 9, 0))
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or AnalyticsConfig()

    def aggregate(
        self,
        shifts: Iterable[ShiftRecord],
        now: Union[date, datetime],
    ) -> list[StaffShiftSummary]:
        """Aggregate shifts per staff member.

        Args:
            shifts: Shift records for one organization.
            now: Reference time for the today/week counts.

        Returns:
            Summaries sorted by shift count (descending), then staff ID.
        """
        groups: dict[str, list[ShiftRecord]] = defaultdict(list)
        for shift in shifts:
            if not shift.is_assigned:
                continue
            groups[shift.staff_member_id].append(shift)

        summaries = [
            self._summarize(staff_id, group, now) for staff_id, group in groups.items()
        ]
        summaries.sort(key=lambda s: (-s.shift_count, s.staff_member_id))
        return summaries

    def _summarize(
        self,
        staff_member_id: str,
        shifts: list[ShiftRecord],
        now: Union[date, datetime],
    ) -> StaffShiftSummary:
        today_count = 0
        week_count = 0
        total_hours = 0.0
        skipped = 0

        for shift in shifts:
            bucket = classify_date(
                shift.shift_date,
                now,
                timezone=self.config.timezone,
                horizon_days=self.config.upcoming_days,
            )
            if bucket == DateBucket.TODAY:
                today_count += 1
            if is_within_week(bucket):
                week_count += 1

            try:
                total_hours += net_hours(shift.start_time, shift.end_time, shift.break_minutes)
            except InvalidShiftTimeError as exc:
                skipped += 1
                logger.warning("Skipping hours for shift %s: %s", shift.id, exc)

        return StaffShiftSummary(
            staff_member_id=staff_member_id,
            shift_count=len(shifts),
            today_count=today_count,
            week_count=week_count,
            total_hours=total_hours,
            skipped_count=skipped,
        )


def aggregate_shifts_by_staff(
    shifts: Iterable[ShiftRecord],
    now: Union[date, datetime],
    config: Optional[AnalyticsConfig] = None,
) -> list[StaffShiftSummary]:
    """Aggregate shifts per staff member with a default-configured aggregator."""
    return ShiftAggregator(config).aggregate(shifts, now)
