"""Weekly client-hour aggregation.

Hours here are always *scheduled* hours (shift end minus shift start), never
clocked timesheet hours. A shift's client comes from its ShiftNotes row, so
shifts without notes never contribute to a client's week.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Sequence, Tuple

from ..common.datetime_utils import week_window
from ..common.numbers import ZERO, round_hours, seconds_to_hours
from ..core.constants import DAYS_PER_WEEK, UNKNOWN_NAME
from ..core.exceptions import NotFoundError
from ..relationships.guard import RelationshipGuard
from ..users.repository import UserRepository
from .model import ShiftHours, ShiftListing
from .repository import ShiftNotesRepository, ShiftRepository

logger = logging.getLogger(__name__)

ClientKey = Tuple[int, int, str]


class ShiftHoursService:
    def __init__(self, shifts: ShiftRepository, notes: ShiftNotesRepository, users: UserRepository):
        self._shifts = shifts
        self._notes = notes
        self._users = users

    def _weekly_totals(
        self, *, provider_id: int, week_start: date, worker_id: Optional[int] = None
    ) -> Dict[ClientKey, Decimal]:
        start, end = week_window(week_start, DAYS_PER_WEEK)
        rows = self._shifts.sum_scheduled_by_client(
            provider_id=int(provider_id), start=start, end=end, worker_id=worker_id
        )
        return {
            (r.support_worker_id, r.service_provider_id, r.client_id): seconds_to_hours(r.scheduled_seconds)
            for r in rows
        }

    def weekly_client_hours(
        self,
        shift_id: int,
        week_start: Optional[date] = None,
        *,
        actor_id: Optional[int] = None,
    ) -> ShiftHours:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found")
        if actor_id is not None:
            RelationshipGuard.ensure_party(
                actor_id, provider_id=shift.service_provider_id, worker_id=shift.support_worker_id, what="shift"
            )

        if week_start is None:
            return ShiftHours(shift_id=shift.shift_id, shift_hours=shift.scheduled_hours, weekly_client_hours=None)

        notes = self._notes.get(shift_id=shift.shift_id)
        if not notes or not notes.client_id:
            return ShiftHours(shift_id=shift.shift_id, shift_hours=shift.scheduled_hours, weekly_client_hours=round_hours(ZERO))

        totals = self._weekly_totals(
            provider_id=shift.service_provider_id, week_start=week_start, worker_id=shift.support_worker_id
        )
        key = (shift.support_worker_id, shift.service_provider_id, notes.client_id)
        return ShiftHours(
            shift_id=shift.shift_id,
            shift_hours=shift.scheduled_hours,
            weekly_client_hours=totals.get(key, round_hours(ZERO)),
        )

    def list_with_client_hours(
        self,
        *,
        provider_id: int,
        week_start: Optional[date] = None,
        worker_id: Optional[int] = None,
    ) -> Sequence[ShiftListing]:
        shifts = self._shifts.list(provider_id=int(provider_id), worker_id=worker_id)
        if not shifts:
            return []

        notes_by_shift = self._notes.get_many(shift_ids=[s.shift_id for s in shifts])
        users = self._users.get_many({s.support_worker_id for s in shifts})
        totals = (
            self._weekly_totals(provider_id=int(provider_id), week_start=week_start, worker_id=worker_id)
            if week_start is not None
            else {}
        )

        listings = []
        for shift in shifts:
            notes = notes_by_shift.get(shift.shift_id)
            worker = users.get(shift.support_worker_id)

            weekly: Optional[Decimal] = None
            if week_start is not None:
                weekly = round_hours(ZERO)
                if notes and notes.client_id:
                    key = (shift.support_worker_id, shift.service_provider_id, notes.client_id)
                    weekly = totals.get(key, weekly)

            listings.append(
                ShiftListing(
                    shift=shift,
                    worker_name=worker.full_name if worker else UNKNOWN_NAME,
                    shift_hours=shift.scheduled_hours,
                    client_id=notes.client_id if notes else None,
                    client_name=notes.client_name if notes else None,
                    task_description=notes.task_description if notes else None,
                    special_requirements=notes.special_requirements if notes else None,
                    weekly_client_hours=weekly,
                )
            )

        logger.debug("Listed %s shifts for provider=%s week_start=%s", len(listings), provider_id, week_start)
        return listings
