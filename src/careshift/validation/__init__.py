"""Validation module for flagging malformed records."""

from careshift.validation.validator import (
    IssueType,
    RecordIssue,
    RecordValidator,
    ValidationResult,
)

__all__ = [
    "IssueType",
    "RecordIssue",
    "RecordValidator",
    "ValidationResult",
]
