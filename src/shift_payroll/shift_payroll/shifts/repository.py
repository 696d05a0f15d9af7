from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import AssignmentStatus, ShiftStatus
from .model import ClientHoursTotal, Shift, ShiftAssignment, ShiftNotes


class ShiftRepository(Protocol):
    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def list(
        self,
        *,
        provider_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        status: Optional[ShiftStatus] = None,
    ) -> Sequence[Shift]:
        raise NotImplementedError

    def create(
        self,
        *,
        provider_id: int,
        worker_id: int,
        title: str,
        start_time: datetime,
        end_time: datetime,
        location: Optional[str] = None,
        description: Optional[str] = None,
        hourly_rate: Optional[Decimal] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, *, shift_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, *, shift_id: int) -> bool:
        raise NotImplementedError

    def sum_scheduled_by_client(
        self,
        *,
        provider_id: int,
        start: datetime,
        end: datetime,
        worker_id: Optional[int] = None,
    ) -> Sequence[ClientHoursTotal]:
        """Scheduled seconds grouped by (worker, provider, client) for shifts
        starting in ``[start, end)``. Shifts without notes/client are excluded."""

        raise NotImplementedError

    # Assignments
    def list_assignments(self, *, shift_id: int) -> Sequence[ShiftAssignment]:
        raise NotImplementedError

    def get_assignment(self, *, assignment_id: int) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def find_assignment(self, *, shift_id: int, worker_id: int) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def create_assignment(self, *, shift_id: int, worker_id: int, status: AssignmentStatus) -> Optional[int]:
        """Returns assignment_id, or None when the (shift, worker) pair already exists."""

        raise NotImplementedError

    def update_assignment_status(self, *, assignment_id: int, status: AssignmentStatus) -> bool:
        raise NotImplementedError


class ShiftNotesRepository(Protocol):
    def get(self, *, shift_id: int) -> Optional[ShiftNotes]:
        raise NotImplementedError

    def get_many(self, *, shift_ids: Iterable[int]) -> Mapping[int, ShiftNotes]:
        raise NotImplementedError

    def upsert(self, notes: ShiftNotes) -> None:
        raise NotImplementedError

    def delete(self, *, shift_id: int) -> bool:
        raise NotImplementedError
