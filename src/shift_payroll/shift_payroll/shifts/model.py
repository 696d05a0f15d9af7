from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.numbers import seconds_to_hours
from ..common.serialization import as_dict
from ..core.enums import AssignmentStatus, ShiftStatus


@dataclass(frozen=True)
class Shift:
    """Domain entity: a scheduled block of work for one worker and provider."""

    shift_id: int
    support_worker_id: int
    service_provider_id: int
    title: str
    start_time: datetime
    end_time: datetime
    status: ShiftStatus = ShiftStatus.SCHEDULED
    location: Optional[str] = None
    description: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    @property
    def scheduled_hours(self) -> Decimal:
        """Scheduled duration, independent of any clocked timesheet."""
        return seconds_to_hours((self.end_time - self.start_time).total_seconds())

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class ShiftAssignment:
    assignment_id: int
    shift_id: int
    support_worker_id: int
    status: AssignmentStatus = AssignmentStatus.ASSIGNED
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class ShiftNotes:
    """Client identity and task annotation attached 1:1 to a shift."""

    shift_id: int
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    task_description: Optional[str] = None
    notes: Optional[str] = None
    special_requirements: Optional[str] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class ClientHoursTotal:
    """Read-model row of the grouped weekly aggregation."""

    support_worker_id: int
    service_provider_id: int
    client_id: str
    scheduled_seconds: int


@dataclass(frozen=True)
class ShiftHours:
    shift_id: int
    shift_hours: Decimal
    weekly_client_hours: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class ShiftListing:
    """A shift enriched with worker name, client fields and hour figures."""

    shift: Shift
    worker_name: str
    shift_hours: Decimal
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    task_description: Optional[str] = None
    special_requirements: Optional[str] = None
    weekly_client_hours: Optional[Decimal] = None

    def to_dict(self) -> dict:
        data = self.shift.to_dict()
        data.update(as_dict(self))
        data.pop("shift")
        return data
