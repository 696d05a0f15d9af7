from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.serialization import as_dict
from ..core.enums import TimesheetStatus

VALID_TRANSITIONS: dict[TimesheetStatus, frozenset[TimesheetStatus]] = {
    TimesheetStatus.DRAFT: frozenset({TimesheetStatus.SUBMITTED}),
    TimesheetStatus.SUBMITTED: frozenset({TimesheetStatus.APPROVED, TimesheetStatus.REJECTED}),
    TimesheetStatus.APPROVED: frozenset(),
    TimesheetStatus.REJECTED: frozenset(),
}


@dataclass(frozen=True)
class Timesheet:
    """Actual worked time against a shift.

    ``total_hours`` stays ``None`` until the worker clocks out. ``version`` is
    bumped on every clock-out write and guards concurrent updates.
    """

    timesheet_id: int
    shift_id: int
    support_worker_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    break_minutes: int = 0
    total_hours: Optional[Decimal] = None
    notes: Optional[str] = None
    status: TimesheetStatus = TimesheetStatus.DRAFT
    version: int = 0
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class TimesheetSummary:
    total_hours: Decimal
    total_timesheets: int
    approved_count: int
    pending_count: int

    def to_dict(self) -> dict:
        return as_dict(self)
