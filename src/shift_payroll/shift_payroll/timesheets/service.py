from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.numbers import ZERO, round_hours
from ..common.validators import optional_strip, require_non_negative_int, require_transition
from ..core.enums import TimesheetStatus
from ..core.exceptions import NotFoundError, StateConflictError
from ..relationships.guard import RelationshipGuard
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .calculator import HoursCalculator, StandardHoursCalculator
from .model import VALID_TRANSITIONS, Timesheet, TimesheetSummary
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)


class TimesheetService:
    def __init__(
        self,
        timesheets: TimesheetRepository,
        shifts: ShiftRepository,
        guard: RelationshipGuard,
        *,
        calculator: Optional[HoursCalculator] = None,
    ):
        self._timesheets = timesheets
        self._shifts = shifts
        self._guard = guard
        self._calculator = calculator or StandardHoursCalculator()

    def get(self, timesheet_id: int) -> Timesheet:
        ts = self._timesheets.get_by_id(int(timesheet_id))
        if not ts:
            raise NotFoundError("Timesheet not found")
        return ts

    def _shift_of(self, ts: Timesheet) -> Shift:
        shift = self._shifts.get_by_id(ts.shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def list(
        self,
        *,
        status: Optional[TimesheetStatus] = None,
        worker_id: Optional[int] = None,
        shift_id: Optional[int] = None,
    ) -> Sequence[Timesheet]:
        return self._timesheets.list(status=status, worker_id=worker_id, shift_id=shift_id)

    def list_for_worker(self, *, provider_id: int, worker_id: int) -> Sequence[Timesheet]:
        self._guard.authorize(provider_id, worker_id)
        provider_shifts = {s.shift_id for s in self._shifts.list(provider_id=int(provider_id), worker_id=int(worker_id))}
        return [ts for ts in self._timesheets.list(worker_id=int(worker_id)) if ts.shift_id in provider_shifts]

    def clock_in(
        self,
        *,
        shift_id: int,
        worker_id: int,
        start_time: datetime,
        break_minutes: int = 0,
        notes: Optional[str] = None,
    ) -> Timesheet:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found")
        self._guard.authorize(shift.service_provider_id, worker_id)

        break_minutes = require_non_negative_int(break_minutes, "break_minutes")
        timesheet_id = self._timesheets.create(
            shift_id=int(shift_id),
            worker_id=int(worker_id),
            start_time=start_time,
            break_minutes=break_minutes,
            notes=optional_strip(notes),
        )
        logger.info("Worker %s clocked in on shift %s (timesheet %s)", worker_id, shift_id, timesheet_id)
        return self.get(timesheet_id)

    def clock_out(
        self,
        *,
        timesheet_id: int,
        worker_id: int,
        end_time: datetime,
        break_minutes: Optional[int] = None,
    ) -> Timesheet:
        ts = self.get(timesheet_id)
        self._guard.ensure_worker(worker_id, ts.support_worker_id, "timesheet")

        if ts.status != TimesheetStatus.DRAFT:
            raise StateConflictError(f"Timesheet is {ts.status.value}; only draft timesheets can be clocked out")

        breaks = ts.break_minutes if break_minutes is None else require_non_negative_int(break_minutes, "break_minutes")
        total = self._calculator.total_hours(ts.start_time, end_time, breaks)

        updated = self._timesheets.update_clock_out(
            timesheet_id=ts.timesheet_id,
            end_time=end_time,
            break_minutes=breaks,
            total_hours=total,
            expected_version=ts.version,
        )
        if not updated:
            logger.warning("Concurrent update on timesheet %s (version %s)", ts.timesheet_id, ts.version)
            raise StateConflictError("Timesheet was modified concurrently, reload and retry")

        logger.info("Worker %s clocked out timesheet %s (%s h)", worker_id, ts.timesheet_id, total)
        return self.get(ts.timesheet_id)

    def _transition(self, ts: Timesheet, target: TimesheetStatus) -> Timesheet:
        require_transition(VALID_TRANSITIONS, ts.status, target, "Timesheet")
        if not self._timesheets.update_status(timesheet_id=ts.timesheet_id, current=ts.status, target=target):
            logger.warning("Timesheet %s changed state before %s", ts.timesheet_id, target.value)
            raise StateConflictError("Timesheet status changed concurrently, reload and retry")
        logger.info("Timesheet %s: %s -> %s", ts.timesheet_id, ts.status.value, target.value)
        return self.get(ts.timesheet_id)

    def _provider_check(self, ts: Timesheet, provider_id: int) -> None:
        shift = self._shift_of(ts)
        self._guard.ensure_owner(provider_id, shift.service_provider_id, "timesheet")
        self._guard.authorize(provider_id, ts.support_worker_id)

    def submit(self, *, timesheet_id: int, worker_id: int) -> Timesheet:
        ts = self.get(timesheet_id)
        self._guard.ensure_worker(worker_id, ts.support_worker_id, "timesheet")
        return self._transition(ts, TimesheetStatus.SUBMITTED)

    def approve(self, *, timesheet_id: int, provider_id: int) -> Timesheet:
        ts = self.get(timesheet_id)
        self._provider_check(ts, provider_id)
        return self._transition(ts, TimesheetStatus.APPROVED)

    def reject(self, *, timesheet_id: int, provider_id: int, reason: Optional[str] = None) -> Timesheet:
        ts = self.get(timesheet_id)
        self._provider_check(ts, provider_id)
        rejected = self._transition(ts, TimesheetStatus.REJECTED)
        if reason:
            logger.info("Timesheet %s rejected by provider %s: %s", ts.timesheet_id, provider_id, reason)
        return rejected

    def delete(self, *, timesheet_id: int, worker_id: int) -> None:
        ts = self.get(timesheet_id)
        self._guard.ensure_worker(worker_id, ts.support_worker_id, "timesheet")
        if ts.status != TimesheetStatus.DRAFT:
            raise StateConflictError("Only draft timesheets can be deleted")
        if not self._timesheets.delete(timesheet_id=ts.timesheet_id, status=TimesheetStatus.DRAFT):
            raise StateConflictError("Timesheet status changed concurrently, reload and retry")
        logger.info("Deleted timesheet %s", ts.timesheet_id)

    def summary(self, worker_id: int, *, actor_id: Optional[int] = None) -> TimesheetSummary:
        if actor_id is not None and int(actor_id) != int(worker_id):
            self._guard.authorize(actor_id, worker_id)

        items = self._timesheets.list(worker_id=int(worker_id))
        total = sum((ts.total_hours or ZERO for ts in items), ZERO)
        return TimesheetSummary(
            total_hours=round_hours(total),
            total_timesheets=len(items),
            approved_count=sum(1 for ts in items if ts.status == TimesheetStatus.APPROVED),
            pending_count=sum(1 for ts in items if ts.status == TimesheetStatus.SUBMITTED),
        )
