from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.numbers import to_decimal
from ..common.validators import optional_strip, require_enum, require_non_empty
from ..core.enums import AssignmentStatus, ShiftStatus
from ..core.exceptions import NotFoundError, StateConflictError, ValidationError
from ..relationships.guard import RelationshipGuard
from .model import Shift, ShiftAssignment, ShiftNotes
from .repository import ShiftNotesRepository, ShiftRepository

logger = logging.getLogger(__name__)

_NOTE_FIELDS = ("client_id", "client_name", "task_description", "notes", "special_requirements")


class ShiftService:
    def __init__(self, shifts: ShiftRepository, notes: ShiftNotesRepository, guard: RelationshipGuard):
        self._shifts = shifts
        self._notes = notes
        self._guard = guard

    @staticmethod
    def _ensure_window(start_time: datetime, end_time: datetime) -> None:
        if end_time <= start_time:
            raise ValidationError("Shift end_time must be after start_time")

    # -------- Shifts --------
    def get(self, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def list(
        self,
        *,
        provider_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        status: Optional[ShiftStatus] = None,
    ) -> Sequence[Shift]:
        return self._shifts.list(provider_id=provider_id, worker_id=worker_id, status=status)

    def create(
        self,
        *,
        provider_id: int,
        worker_id: int,
        title: str,
        start_time: datetime,
        end_time: datetime,
        location: Optional[str] = None,
        hourly_rate=None,
        description: Optional[str] = None,
    ) -> Shift:
        self._guard.authorize(provider_id, worker_id)

        title = require_non_empty(title, "title")
        self._ensure_window(start_time, end_time)
        rate = to_decimal(hourly_rate, "hourly_rate") if hourly_rate is not None else None

        shift_id = self._shifts.create(
            provider_id=int(provider_id),
            worker_id=int(worker_id),
            title=title,
            start_time=start_time,
            end_time=end_time,
            location=optional_strip(location),
            description=optional_strip(description),
            hourly_rate=rate,
        )
        logger.info("Created shift %s for worker=%s provider=%s", shift_id, worker_id, provider_id)
        return self.get(shift_id)

    def update(self, *, shift_id: int, provider_id: int, **fields: Any) -> Shift:
        shift = self.get(shift_id)
        self._guard.ensure_owner(provider_id, shift.service_provider_id, "shift")

        changes: dict[str, Any] = {}
        for name, value in fields.items():
            if name == "title":
                changes[name] = require_non_empty(value, "title")
            elif name in {"description", "location"}:
                changes[name] = optional_strip(value)
            elif name in {"start_time", "end_time"}:
                if not isinstance(value, datetime):
                    raise ValidationError(f"{name} must be a datetime")
                changes[name] = value
            elif name == "hourly_rate":
                changes[name] = to_decimal(value, "hourly_rate") if value is not None else None
            elif name == "status":
                # Shift status is open: any value may follow any other.
                changes[name] = require_enum(ShiftStatus, value, "status")
            else:
                raise ValidationError(f"Field {name!r} cannot be updated")

        self._ensure_window(changes.get("start_time", shift.start_time), changes.get("end_time", shift.end_time))

        if not self._shifts.update(shift_id=int(shift_id), fields=changes):
            raise NotFoundError("Shift not found")
        logger.info("Updated shift %s fields=%s", shift_id, sorted(changes))
        return self.get(shift_id)

    def delete(self, *, shift_id: int, provider_id: int) -> None:
        shift = self.get(shift_id)
        self._guard.ensure_owner(provider_id, shift.service_provider_id, "shift")
        if not self._shifts.delete(shift_id=int(shift_id)):
            raise NotFoundError("Shift not found")
        logger.info("Deleted shift %s", shift_id)

    # -------- Assignments --------
    def list_assignments(self, *, shift_id: int, actor_id: int) -> Sequence[ShiftAssignment]:
        shift = self.get(shift_id)
        self._guard.ensure_party(
            actor_id, provider_id=shift.service_provider_id, worker_id=shift.support_worker_id, what="shift"
        )
        return self._shifts.list_assignments(shift_id=int(shift_id))

    def assign(
        self,
        *,
        shift_id: int,
        provider_id: int,
        worker_id: int,
        status=AssignmentStatus.ASSIGNED,
    ) -> ShiftAssignment:
        shift = self.get(shift_id)
        self._guard.ensure_owner(provider_id, shift.service_provider_id, "shift")
        self._guard.authorize(shift.service_provider_id, worker_id)
        status = require_enum(AssignmentStatus, status, "status")

        if self._shifts.find_assignment(shift_id=int(shift_id), worker_id=int(worker_id)):
            raise StateConflictError("Worker is already assigned to this shift")

        assignment_id = self._shifts.create_assignment(shift_id=int(shift_id), worker_id=int(worker_id), status=status)
        if assignment_id is None:
            raise StateConflictError("Worker is already assigned to this shift")

        logger.info("Assigned worker=%s to shift %s (%s)", worker_id, shift_id, status.value)
        assignment = self._shifts.get_assignment(assignment_id=assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def update_assignment_status(
        self, *, assignment_id: int, actor_id: int, status, shift_id: Optional[int] = None
    ) -> ShiftAssignment:
        assignment = self._shifts.get_assignment(assignment_id=int(assignment_id))
        if not assignment or (shift_id is not None and assignment.shift_id != int(shift_id)):
            raise NotFoundError("Assignment not found")
        status = require_enum(AssignmentStatus, status, "status")

        shift = self.get(assignment.shift_id)
        self._guard.ensure_party(
            actor_id, provider_id=shift.service_provider_id, worker_id=assignment.support_worker_id, what="assignment"
        )

        if not self._shifts.update_assignment_status(assignment_id=int(assignment_id), status=status):
            raise NotFoundError("Assignment not found")
        logger.info("Assignment %s -> %s", assignment_id, status.value)
        updated = self._shifts.get_assignment(assignment_id=int(assignment_id))
        if not updated:
            raise NotFoundError("Assignment not found")
        return updated

    # -------- Notes --------
    def _party_shift(self, shift_id: int, actor_id: int) -> Shift:
        shift = self.get(shift_id)
        self._guard.ensure_party(
            actor_id, provider_id=shift.service_provider_id, worker_id=shift.support_worker_id, what="shift"
        )
        return shift

    def save_notes(self, *, shift_id: int, actor_id: int, **values: Optional[str]) -> ShiftNotes:
        """Create notes, or merge non-empty values over the stored ones."""
        self._party_shift(shift_id, actor_id)

        unknown = set(values) - set(_NOTE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown note fields: {', '.join(sorted(unknown))}")

        existing = self._notes.get(shift_id=int(shift_id))
        merged = {}
        for name in _NOTE_FIELDS:
            new_value = optional_strip(values.get(name))
            old_value = getattr(existing, name) if existing else None
            merged[name] = new_value if new_value is not None else old_value

        notes = ShiftNotes(shift_id=int(shift_id), **merged)
        self._notes.upsert(notes)
        logger.info("Saved notes for shift %s (client=%s)", shift_id, notes.client_id)
        return notes

    def get_notes(self, *, shift_id: int, actor_id: int) -> ShiftNotes:
        self._party_shift(shift_id, actor_id)
        notes = self._notes.get(shift_id=int(shift_id))
        if not notes:
            raise NotFoundError("Shift notes not found")
        return notes

    def delete_notes(self, *, shift_id: int, actor_id: int) -> None:
        self._party_shift(shift_id, actor_id)
        if not self._notes.delete(shift_id=int(shift_id)):
            raise NotFoundError("Shift notes not found")
