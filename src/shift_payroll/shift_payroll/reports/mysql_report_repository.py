from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ShiftReportQueryRow
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_shift_rows(self, *, provider_id: int, start: datetime, end: datetime) -> Sequence[ShiftReportQueryRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.shift_id, s.start_time, s.end_time,
                    u.full_name AS worker_name,
                    t.timesheet_id, t.start_time AS clock_in, t.end_time AS clock_out,
                    t.break_minutes, t.total_hours,
                    n.client_name
                FROM shifts s
                LEFT JOIN users u ON u.user_id = s.support_worker_id
                LEFT JOIN timesheets t ON t.shift_id = s.shift_id
                LEFT JOIN shift_notes n ON n.shift_id = s.shift_id
                WHERE s.service_provider_id=%s
                  AND s.start_time BETWEEN %s AND %s
                ORDER BY s.start_time ASC, s.shift_id ASC, t.timesheet_id ASC
                """,
                (int(provider_id), start, end),
            )
            rows = fetchall(cur)

            return [
                ShiftReportQueryRow(
                    shift_id=int(r["shift_id"]),
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    worker_name=r.get("worker_name"),
                    timesheet_id=int(r["timesheet_id"]) if r.get("timesheet_id") is not None else None,
                    clock_in=r.get("clock_in"),
                    clock_out=r.get("clock_out"),
                    break_minutes=r.get("break_minutes"),
                    total_hours=r.get("total_hours"),
                    client_name=r.get("client_name"),
                )
                for r in rows
            ]
