from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TimesheetStatus
from .model import Timesheet


class TimesheetRepository(Protocol):
    def get_by_id(self, timesheet_id: int) -> Optional[Timesheet]:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[TimesheetStatus] = None,
        worker_id: Optional[int] = None,
        shift_id: Optional[int] = None,
    ) -> Sequence[Timesheet]:
        raise NotImplementedError

    def create(
        self,
        *,
        shift_id: int,
        worker_id: int,
        start_time: datetime,
        break_minutes: int,
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_clock_out(
        self,
        *,
        timesheet_id: int,
        end_time: datetime,
        break_minutes: int,
        total_hours: Decimal,
        expected_version: int,
    ) -> bool:
        """Write the clock-out only if the row is still a draft at ``expected_version``.

        Returns False when another writer got there first.
        """

        raise NotImplementedError

    def update_status(self, *, timesheet_id: int, current: TimesheetStatus, target: TimesheetStatus) -> bool:
        """Compare-and-set on status. Returns False when the row is no longer ``current``."""

        raise NotImplementedError

    def delete(self, *, timesheet_id: int, status: TimesheetStatus) -> bool:
        raise NotImplementedError
