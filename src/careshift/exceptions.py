"""Exception types raised by careshift.

Aggregations never raise on a single bad record; these exceptions are raised
by the low-level helpers and by record parsing, and are caught where a record
can be isolated.
"""

from typing import Optional


class CareshiftError(Exception):
    """Base class for all careshift errors."""


class RecordFormatError(CareshiftError, ValueError):
    """A persistence row is missing a required field or has the wrong type."""

    def __init__(self, record_type: str, field_name: str, message: Optional[str] = None):
        self.record_type = record_type
        self.field_name = field_name
        super().__init__(
            message or f"{record_type} row is missing required field '{field_name}'"
        )


class InvalidShiftTimeError(CareshiftError, ValueError):
    """A time-of-day value or shift span cannot be used for hour arithmetic."""
