from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import ShiftReportQueryRow


class ReportRepository(Protocol):
    def get_shift_rows(self, *, provider_id: int, start: datetime, end: datetime) -> Sequence[ShiftReportQueryRow]:
        """Provider's shifts starting in ``[start, end]`` left-joined with worker,
        timesheets and notes, ordered by (shift start, shift id, timesheet id)."""

        raise NotImplementedError
