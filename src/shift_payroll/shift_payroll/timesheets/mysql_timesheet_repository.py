from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import TimesheetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import Timesheet
from .repository import TimesheetRepository

TIMESHEET_COLUMNS = """
    timesheet_id, shift_id, support_worker_id, start_time, end_time,
    break_minutes, total_hours, notes, status, version, created_at
"""


def row_to_timesheet(r: dict) -> Timesheet:
    return Timesheet(
        timesheet_id=int(r["timesheet_id"]),
        shift_id=int(r["shift_id"]),
        support_worker_id=int(r["support_worker_id"]),
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        break_minutes=int(r.get("break_minutes") or 0),
        total_hours=r.get("total_hours"),
        notes=r.get("notes"),
        status=TimesheetStatus(r["status"]),
        version=int(r.get("version") or 0),
        created_at=r.get("created_at"),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, timesheet_id: int) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {TIMESHEET_COLUMNS} FROM timesheets WHERE timesheet_id=%s", (int(timesheet_id),))
            r = fetchone(cur)
            return row_to_timesheet(r) if r else None

    def list(
        self,
        *,
        status: Optional[TimesheetStatus] = None,
        worker_id: Optional[int] = None,
        shift_id: Optional[int] = None,
    ) -> Sequence[Timesheet]:
        where, params = build_where({"status": status, "support_worker_id": worker_id, "shift_id": shift_id})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {TIMESHEET_COLUMNS}
                FROM timesheets
                WHERE {where}
                ORDER BY start_time DESC, timesheet_id DESC
                """,
                tuple(params),
            )
            return [row_to_timesheet(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        shift_id: int,
        worker_id: int,
        start_time: datetime,
        break_minutes: int,
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timesheets(shift_id, support_worker_id, start_time, break_minutes, notes, status, version)
                VALUES(%s,%s,%s,%s,%s,%s,0)
                """,
                (int(shift_id), int(worker_id), start_time, int(break_minutes), notes, TimesheetStatus.DRAFT.value),
            )
            return int(cur.lastrowid)

    def update_clock_out(
        self,
        *,
        timesheet_id: int,
        end_time: datetime,
        break_minutes: int,
        total_hours: Decimal,
        expected_version: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timesheets
                SET end_time=%s, break_minutes=%s, total_hours=%s, version=version+1
                WHERE timesheet_id=%s AND version=%s AND status=%s
                """,
                (
                    end_time,
                    int(break_minutes),
                    total_hours,
                    int(timesheet_id),
                    int(expected_version),
                    TimesheetStatus.DRAFT.value,
                ),
            )
            return cur.rowcount == 1

    def update_status(self, *, timesheet_id: int, current: TimesheetStatus, target: TimesheetStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE timesheets SET status=%s WHERE timesheet_id=%s AND status=%s",
                (target.value, int(timesheet_id), current.value),
            )
            return cur.rowcount == 1

    def delete(self, *, timesheet_id: int, status: TimesheetStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM timesheets WHERE timesheet_id=%s AND status=%s",
                (int(timesheet_id), status.value),
            )
            return cur.rowcount == 1
