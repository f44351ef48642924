"""Record sources for the analytics engine.

The engine does not query storage itself. A RecordSource hands it the
records for one organization; implementations wrap whatever persistence
service holds them. Two are provided: an in-memory source and a source
backed by a JSON document.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, Union

from careshift.domain.models import (
    AppointmentRecord,
    ReminderRecord,
    ShiftRecord,
    StaffEarningsInput,
)

DateRange = tuple[date, date]


class RecordSource(ABC):
    """Abstract base class for record retrieval."""

    @abstractmethod
    def list_shifts_for_org(
        self,
        organization_id: str,
        date_range: Optional[DateRange] = None,
    ) -> list[ShiftRecord]:
        """Shifts for an organization, optionally within an inclusive date range."""
        pass

    @abstractmethod
    def list_paid_appointments_for_org(
        self,
        organization_id: str,
        since_date: date,
    ) -> list[AppointmentRecord]:
        """Paid appointments dated on or after since_date."""
        pass

    @abstractmethod
    def list_recent_appointments_for_org(
        self,
        organization_id: str,
        since_date: date,
    ) -> list[AppointmentRecord]:
        """Appointments of any payment status dated on or after since_date."""
        pass

    @abstractmethod
    def list_pending_reminders_for_org(self, organization_id: str) -> list[ReminderRecord]:
        """Pending reminders for an organization's clients."""
        pass

    @abstractmethod
    def list_staff_with_rates(self, organization_id: str) -> list[StaffEarningsInput]:
        """Staff members with their hourly rates."""
        pass


@dataclass
class OrganizationRecords:
    """All records held for one organization."""

    shifts: list[ShiftRecord] = field(default_factory=list)
    appointments: list[AppointmentRecord] = field(default_factory=list)
    reminders: list[ReminderRecord] = field(default_factory=list)
    staff: list[StaffEarningsInput] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "OrganizationRecords":
        """Build records from a mapping of row lists.

        Raises:
            RecordFormatError: If any row is missing a required field.
        """
        return cls(
            shifts=[ShiftRecord.from_dict(r) for r in data.get("shifts", [])],
            appointments=[AppointmentRecord.from_dict(r) for r in data.get("appointments", [])],
            reminders=[ReminderRecord.from_dict(r) for r in data.get("reminders", [])],
            staff=[StaffEarningsInput.from_dict(r) for r in data.get("staff", [])],
        )


class InMemoryRecordSource(RecordSource):
    """Record source over records already held in memory.

    Shifts and appointments are matched to an organization by their
    organization_id. Reminders and staff carry no organization, so they are
    registered per organization.

    Example:
        >>> source = InMemoryRecordSource()
        >>> source.add_organization("org-1", OrganizationRecords(shifts=shifts))
        >>> source.list_shifts_for_org("org-1")
    """

    def __init__(self, organizations: Optional[dict[str, OrganizationRecords]] = None):
        self.organizations: dict[str, OrganizationRecords] = dict(organizations or {})

    def add_organization(self, organization_id: str, records: OrganizationRecords) -> None:
        self.organizations[organization_id] = records

    def _records(self, organization_id: str) -> OrganizationRecords:
        return self.organizations.get(organization_id, OrganizationRecords())

    def list_shifts_for_org(
        self,
        organization_id: str,
        date_range: Optional[DateRange] = None,
    ) -> list[ShiftRecord]:
        shifts = [
            s for s in self._records(organization_id).shifts
            if s.organization_id == organization_id
        ]
        if date_range is not None:
            start, end = date_range
            shifts = [s for s in shifts if start <= s.shift_date <= end]
        return sorted(shifts, key=lambda s: (s.shift_date, str(s.start_time), s.id))

    def list_paid_appointments_for_org(
        self,
        organization_id: str,
        since_date: date,
    ) -> list[AppointmentRecord]:
        return [
            a for a in self.list_recent_appointments_for_org(organization_id, since_date)
            if a.is_paid
        ]

    def list_recent_appointments_for_org(
        self,
        organization_id: str,
        since_date: date,
    ) -> list[AppointmentRecord]:
        return [
            a for a in self._records(organization_id).appointments
            if a.organization_id == organization_id and a.appointment_date >= since_date
        ]

    def list_pending_reminders_for_org(self, organization_id: str) -> list[ReminderRecord]:
        return [r for r in self._records(organization_id).reminders if r.is_pending]

    def list_staff_with_rates(self, organization_id: str) -> list[StaffEarningsInput]:
        return list(self._records(organization_id).staff)


class JsonRecordSource(InMemoryRecordSource):
    """Record source loaded from a JSON document.

    The document is either a single organization's records::

        {"organization_id": "org-1", "shifts": [...], "appointments": [...],
         "reminders": [...], "staff": [...]}

    or a mapping of organization IDs to such record sets under
    ``"organizations"``.
    """

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "JsonRecordSource":
        """Load records from a JSON file."""
        with open(path, encoding="utf-8") as f:
            return cls.from_data(json.load(f))

    @classmethod
    def from_data(cls, data: dict) -> "JsonRecordSource":
        """Load records from an already decoded JSON document."""
        source = cls()
        if "organizations" in data:
            for organization_id, records in data["organizations"].items():
                source.add_organization(organization_id, OrganizationRecords.from_dict(records))
        else:
            records = OrganizationRecords.from_dict(data)
            organization_id = data.get("organization_id")
            if organization_id is None:
                # Fall back to the organization the rows themselves name
                owners = [r.organization_id for r in records.shifts + records.appointments]
                organization_id = owners[0] if owners else "default"
            source.add_organization(str(organization_id), records)
        return source

    @property
    def organization_ids(self) -> list[str]:
        return sorted(self.organizations)
