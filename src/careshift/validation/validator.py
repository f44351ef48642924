"""Validation of externally supplied records.

Records arrive from the persistence layer unvalidated. The validator checks
every record the analytics read and reports problems as issues instead of
raising, so a caller can show which records were left out of the totals.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from careshift.domain.models import (
    AppointmentRecord,
    ReminderRecord,
    ShiftRecord,
    ShiftStatus,
    StaffEarningsInput,
)
from careshift.domain.timeutils import parse_time, span_minutes
from careshift.exceptions import InvalidShiftTimeError

KNOWN_SHIFT_STATUSES = {s.value for s in ShiftStatus}


class IssueType(Enum):
    """Types of record issues."""

    MALFORMED_TIME = "malformed_time"
    REVERSED_SPAN = "reversed_span"
    NEGATIVE_BREAK = "negative_break"
    BREAK_EXCEEDS_SPAN = "break_exceeds_span"
    UNKNOWN_STATUS = "unknown_status"
    UNASSIGNED_SHIFT = "unassigned_shift"
    UNKNOWN_STAFF = "unknown_staff"
    NEGATIVE_AMOUNT = "negative_amount"
    NEGATIVE_RATE = "negative_rate"


# Issues that exclude a record from numeric sums. The others are informational.
EXCLUDING_ISSUES = {
    IssueType.MALFORMED_TIME,
    IssueType.REVERSED_SPAN,
    IssueType.NEGATIVE_BREAK,
}


@dataclass
class RecordIssue:
    """A single problem found on a record."""

    issue_type: IssueType
    message: str
    record_type: str
    record_id: Optional[str] = None
    details: dict = field(default_factory=dict)

    @property
    def excludes_record(self) -> bool:
        return self.issue_type in EXCLUDING_ISSUES

    def __str__(self) -> str:
        parts = [f"[{self.issue_type.value}]"]
        if self.record_id:
            parts.append(f"{self.record_type} {self.record_id}:")
        parts.append(self.message)
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "issue_type": self.issue_type.value,
            "message": self.message,
            "record_type": self.record_type,
            "record_id": self.record_id,
            "details": self.details,
        }


@dataclass
class ValidationResult:
    """Result of validating a batch of records."""

    is_valid: bool = True
    issues: list[RecordIssue] = field(default_factory=list)
    warnings: list[RecordIssue] = field(default_factory=list)

    def add_issue(self, issue: RecordIssue) -> None:
        """Add an issue that excludes data and mark the batch invalid."""
        self.issues.append(issue)
        self.is_valid = False

    def add_warning(self, issue: RecordIssue) -> None:
        """Add an informational issue (doesn't affect validity)."""
        self.warnings.append(issue)

    def excluded_ids(self, record_type: str) -> set[str]:
        """IDs of records of one type that are left out of numeric sums."""
        return {
            i.record_id for i in self.issues
            if i.record_type == record_type and i.record_id and i.excludes_record
        }


class RecordValidator:
    """Checks records for values the analytics cannot use.

    Example:
        >>> validator = RecordValidator()
        >>> result = validator.validate_shifts(shifts, staff_rates)
        >>> for issue in result.issues:
        ...     print(issue)
    """

    def validate_shifts(
        self,
        shifts: Iterable[ShiftRecord],
        staff_rates: Optional[Iterable[StaffEarningsInput]] = None,
        result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Validate shift records.

        Args:
            shifts: Shift records to check.
            staff_rates: Optional staff rates; when given, completed shifts
                whose staff member has no rate are reported.
            result: Existing result to add to.

        Returns:
            ValidationResult with issues (excluded from sums) and warnings.
        """
        result = result if result is not None else ValidationResult()
        known_staff = (
            {s.staff_member_id for s in staff_rates} if staff_rates is not None else None
        )

        for shift in shifts:
            self._validate_shift(shift, known_staff, result)

        return result

    def _validate_shift(
        self,
        shift: ShiftRecord,
        known_staff: Optional[set[str]],
        result: ValidationResult,
    ) -> None:
        record_type = "shift"

        if shift.status_value not in KNOWN_SHIFT_STATUSES:
            result.add_warning(RecordIssue(
                issue_type=IssueType.UNKNOWN_STATUS,
                message=f"Unknown status '{shift.status}'",
                record_type=record_type,
                record_id=shift.id,
            ))

        if not shift.is_assigned:
            result.add_warning(RecordIssue(
                issue_type=IssueType.UNASSIGNED_SHIFT,
                message="Shift has no staff member",
                record_type=record_type,
                record_id=shift.id,
            ))
        elif (
            known_staff is not None
            and shift.has_status(ShiftStatus.COMPLETED)
            and shift.staff_member_id not in known_staff
        ):
            result.add_warning(RecordIssue(
                issue_type=IssueType.UNKNOWN_STAFF,
                message=f"No hourly rate for staff member {shift.staff_member_id}",
                record_type=record_type,
                record_id=shift.id,
                details={"staff_member_id": shift.staff_member_id},
            ))

        for label, value in (("start_time", shift.start_time), ("end_time", shift.end_time)):
            try:
                parse_time(value)
            except InvalidShiftTimeError:
                result.add_issue(RecordIssue(
                    issue_type=IssueType.MALFORMED_TIME,
                    message=f"Cannot parse {label} {value!r}",
                    record_type=record_type,
                    record_id=shift.id,
                    details={"field": label, "value": str(value)},
                ))
                return

        try:
            span = span_minutes(shift.start_time, shift.end_time)
        except InvalidShiftTimeError:
            result.add_issue(RecordIssue(
                issue_type=IssueType.REVERSED_SPAN,
                message=f"Ends before it starts ({shift.start_time}-{shift.end_time})",
                record_type=record_type,
                record_id=shift.id,
            ))
            return

        break_minutes = shift.break_minutes or 0
        if break_minutes < 0:
            result.add_issue(RecordIssue(
                issue_type=IssueType.NEGATIVE_BREAK,
                message=f"Negative break of {break_minutes} minutes",
                record_type=record_type,
                record_id=shift.id,
            ))
        elif break_minutes > span:
            result.add_warning(RecordIssue(
                issue_type=IssueType.BREAK_EXCEEDS_SPAN,
                message=f"Break of {break_minutes:g} minutes exceeds {span:g} minute shift",
                record_type=record_type,
                record_id=shift.id,
                details={"break_minutes": break_minutes, "span_minutes": span},
            ))

    def validate_appointments(
        self,
        appointments: Iterable[AppointmentRecord],
        result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Validate appointment records (negative costs and rates)."""
        result = result if result is not None else ValidationResult()
        for appt in appointments:
            if appt.total_cost < 0:
                result.add_warning(RecordIssue(
                    issue_type=IssueType.NEGATIVE_AMOUNT,
                    message=f"Negative total cost {appt.total_cost}",
                    record_type="appointment",
                    record_id=appt.id,
                ))
            if appt.hourly_rate is not None and appt.hourly_rate < 0:
                result.add_warning(RecordIssue(
                    issue_type=IssueType.NEGATIVE_RATE,
                    message=f"Negative hourly rate {appt.hourly_rate}",
                    record_type="appointment",
                    record_id=appt.id,
                ))
        return result

    def validate_reminders(
        self,
        reminders: Iterable[ReminderRecord],
        result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Validate reminder records (malformed reminder times)."""
        result = result if result is not None else ValidationResult()
        for reminder in reminders:
            if reminder.reminder_time is None:
                continue
            try:
                parse_time(reminder.reminder_time)
            except InvalidShiftTimeError:
                result.add_warning(RecordIssue(
                    issue_type=IssueType.MALFORMED_TIME,
                    message=f"Cannot parse reminder_time {reminder.reminder_time!r}",
                    record_type="reminder",
                    record_id=reminder.id,
                ))
        return result

    def validate_staff(
        self,
        staff_rates: Iterable[StaffEarningsInput],
        result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Validate staff rate entries."""
        result = result if result is not None else ValidationResult()
        for staff in staff_rates:
            if staff.hourly_rate < 0:
                result.add_warning(RecordIssue(
                    issue_type=IssueType.NEGATIVE_RATE,
                    message=f"Negative hourly rate {staff.hourly_rate}",
                    record_type="staff",
                    record_id=staff.staff_member_id,
                ))
        return result
