"""Organization-wide shift statistics."""

import logging
from collections import Counter
from typing import Iterable, Optional

from careshift.domain.models import (
    AnalyticsConfig,
    PeakHour,
    ShiftRecord,
    ShiftStats,
    ShiftStatus,
)
from careshift.domain.timeutils import start_hour
from careshift.exceptions import InvalidShiftTimeError

logger = logging.getLogger(__name__)


class ShiftStatsEngine:
    """Computes completion rate, outcome counts and peak start hours.

    Example:
        >>> stats = ShiftStatsEngine().compute(shifts)
        >>> stats.completion_rate
        80.0
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        self.config = config or AnalyticsConfig()

    def compute(self, shifts: Iterable[ShiftRecord]) -> ShiftStats:
        """Compute statistics over shifts of any status."""
        shifts = list(shifts)
        total = len(shifts)
        completed = sum(1 for s in shifts if s.has_status(ShiftStatus.COMPLETED))
        cancelled = sum(1 for s in shifts if s.has_status(ShiftStatus.CANCELLED))
        no_show = sum(1 for s in shifts if s.has_status(ShiftStatus.NO_SHOW))

        return ShiftStats(
            total_count=total,
            completed_count=completed,
            cancelled_count=cancelled,
            no_show_count=no_show,
            completion_rate=(completed / total * 100.0) if total else 0.0,
            peak_hours=self.peak_hours(shifts),
        )

    def peak_hours(
        self,
        shifts: Iterable[ShiftRecord],
        top: Optional[int] = None,
    ) -> list[PeakHour]:
        """Most frequent shift start hours.

        Ties in frequency go to the earlier hour.

        Args:
            shifts: Shifts of any status.
            top: Number of hours to return (defaults to config.peak_hour_count).
        """
        limit = self.config.peak_hour_count if top is None else max(0, top)
        histogram: Counter = Counter()
        for shift in shifts:
            try:
                histogram[start_hour(shift.start_time)] += 1
            except InvalidShiftTimeError as exc:
                logger.warning("Shift %s left out of peak hours: %s", shift.id, exc)

        ranked = sorted(histogram.items(), key=lambda item: (-item[1], item[0]))
        return [PeakHour(hour=hour, count=count) for hour, count in ranked[:limit]]


def compute_shift_stats(all_shifts: Iterable[ShiftRecord]) -> ShiftStats:
    """Compute completion rate, outcome counts and the top 3 peak hours."""
    return ShiftStatsEngine().compute(all_shifts)
