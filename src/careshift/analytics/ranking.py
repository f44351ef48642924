"""Top-earning staff ranking.

Earnings use the full shift span without deducting breaks, unlike the net
hours reported in per-staff shift totals.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from careshift.domain.models import (
    AnalyticsConfig,
    ShiftRecord,
    ShiftStatus,
    StaffEarningsInput,
    StaffRankEntry,
)
from careshift.domain.timeutils import net_hours
from careshift.exceptions import InvalidShiftTimeError

logger = logging.getLogger(__name__)


@dataclass
class _EarningsTally:
    display_name: str
    shifts: int = 0
    earnings: float = 0.0


class StaffRanker:
    """Ranks staff by earnings from completed shifts.

    Shifts that are unassigned, or whose staff member has no rate entry,
    are excluded from the ranking entirely.
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or AnalyticsConfig()

    def rank(
        self,
        completed_shifts: Iterable[ShiftRecord],
        staff_rates: Iterable[StaffEarningsInput],
        k: Optional[int] = None,
    ) -> list[StaffRankEntry]:
        """Rank staff by total earnings.

        Args:
            completed_shifts: Shift records; anything not completed is ignored.
            staff_rates: Rate and display name for each staff member.
            k: Maximum entries returned (defaults to config.top_k).

        Returns:
            At most k entries sorted by earnings (descending), then staff ID.
        """
        limit = self.config.top_k if k is None else max(0, k)
        rates = {s.staff_member_id: s for s in staff_rates}
        tallies: dict[str, _EarningsTally] = {}

        for shift in completed_shifts:
            if not shift.has_status(ShiftStatus.COMPLETED):
                continue
            staff = rates.get(shift.staff_member_id) if shift.is_assigned else None
            if staff is None:
                continue

            tally = tallies.get(staff.staff_member_id)
            if tally is None:
                tally = _EarningsTally(display_name=staff.display_name)
                tallies[staff.staff_member_id] = tally

            tally.shifts += 1
            try:
                tally.earnings += net_hours(shift.start_time, shift.end_time, 0) * staff.hourly_rate
            except InvalidShiftTimeError as exc:
                logger.warning("Shift %s adds no earnings: %s", shift.id, exc)

        entries = [
            StaffRankEntry(
                staff_member_id=staff_id,
                display_name=tally.display_name,
                shifts_completed=tally.shifts,
                total_earnings=tally.earnings,
            )
            for staff_id, tally in tallies.items()
        ]
        entries.sort(key=lambda e: (-e.total_earnings, e.staff_member_id))
        return entries[:limit]


def rank_top_staff(
    completed_shifts: Iterable[ShiftRecord],
    staff_rates: Iterable[StaffEarningsInput],
    k: int = 5,
) -> list[StaffRankEntry]:
    """Return the k highest-earning staff members."""
    return StaffRanker().rank(completed_shifts, staff_rates, k=k)
