from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core.constants import NOT_AVAILABLE


def format_date(value: date) -> str:
    """e.g. ``Jan 15, 2024``"""
    return f"{value:%b} {value.day}, {value.year}"


def format_time(value: datetime) -> str:
    """e.g. ``9:00 AM``"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_hours(value: Decimal) -> str:
    return f"{value:.2f}"


@dataclass(frozen=True)
class ShiftReportQueryRow:
    """One joined shift x timesheet row, before per-shift de-duplication."""

    shift_id: int
    start_time: datetime
    end_time: datetime
    worker_name: Optional[str]
    timesheet_id: Optional[int] = None
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_minutes: Optional[int] = None
    total_hours: Optional[Decimal] = None
    client_name: Optional[str] = None


@dataclass(frozen=True)
class ShiftReportRow:
    worker_name: str
    client_name: str
    shift_date: date
    scheduled_start: datetime
    scheduled_end: datetime
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    break_minutes: int
    total_hours: Decimal

    def to_dict(self) -> dict:
        return {
            "worker_name": self.worker_name,
            "client_name": self.client_name,
            "shift_date": format_date(self.shift_date),
            "scheduled_start": format_time(self.scheduled_start),
            "scheduled_end": format_time(self.scheduled_end),
            "clock_in": format_time(self.clock_in) if self.clock_in else NOT_AVAILABLE,
            "clock_out": format_time(self.clock_out) if self.clock_out else NOT_AVAILABLE,
            "break_minutes": self.break_minutes,
            "total_hours": format_hours(self.total_hours),
        }


@dataclass(frozen=True)
class ShiftReportSummary:
    company_name: str
    start_date: datetime
    end_date: datetime
    rows: Tuple[ShiftReportRow, ...]
    total_shifts: int
    total_hours: Decimal
    worker_names: frozenset

    @property
    def unique_workers(self) -> int:
        return len(self.worker_names)

    def to_dict(self) -> dict:
        return {
            "company_name": self.company_name,
            "start_date": format_date(self.start_date),
            "end_date": format_date(self.end_date),
            "shifts": [r.to_dict() for r in self.rows],
            "summary": {
                "total_shifts": self.total_shifts,
                "total_hours": format_hours(self.total_hours),
                "unique_workers": self.unique_workers,
            },
        }
