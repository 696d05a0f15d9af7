from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

import mysql.connector

from ..core.enums import AssignmentStatus, ShiftStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause
from .model import ClientHoursTotal, Shift, ShiftAssignment, ShiftNotes
from .repository import ShiftNotesRepository, ShiftRepository

_SHIFT_COLUMNS = """
    shift_id, support_worker_id, service_provider_id, title, description,
    start_time, end_time, location, status, hourly_rate, created_at
"""

UPDATABLE_SHIFT_COLUMNS = frozenset(
    {"title", "description", "start_time", "end_time", "location", "status", "hourly_rate"}
)


def _row_to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        support_worker_id=int(r["support_worker_id"]),
        service_provider_id=int(r["service_provider_id"]),
        title=r["title"],
        description=r.get("description"),
        start_time=r["start_time"],
        end_time=r["end_time"],
        location=r.get("location"),
        status=ShiftStatus(r["status"]),
        hourly_rate=r.get("hourly_rate"),
        created_at=r.get("created_at"),
    )


def _row_to_assignment(r: dict) -> ShiftAssignment:
    return ShiftAssignment(
        assignment_id=int(r["assignment_id"]),
        shift_id=int(r["shift_id"]),
        support_worker_id=int(r["support_worker_id"]),
        status=AssignmentStatus(r["status"]),
        created_at=r.get("created_at"),
    )


def _row_to_notes(r: dict) -> ShiftNotes:
    return ShiftNotes(
        shift_id=int(r["shift_id"]),
        client_id=r.get("client_id"),
        client_name=r.get("client_name"),
        task_description=r.get("task_description"),
        notes=r.get("notes"),
        special_requirements=r.get("special_requirements"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shifts WHERE shift_id=%s", (int(shift_id),))
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def list(
        self,
        *,
        provider_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        status: Optional[ShiftStatus] = None,
    ) -> Sequence[Shift]:
        where, params = build_where(
            {"service_provider_id": provider_id, "support_worker_id": worker_id, "status": status}
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM shifts
                WHERE {where}
                ORDER BY start_time ASC, shift_id ASC
                """,
                tuple(params),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shifts(
                    support_worker_id, service_provider_id, title, description,
                    start_time, end_time, location, status, hourly_rate
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(worker_id),
                    int(provider_id),
                    title,
                    description,
                    start_time,
                    end_time,
                    location,
                    ShiftStatus.SCHEDULED.value,
                    hourly_rate,
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, shift_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - UPDATABLE_SHIFT_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported shift columns: {sorted(unknown)}")
        if not fields:
            return self.get_by_id(shift_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in fields)
        params = [getattr(v, "value", v) for v in fields.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE shifts SET {assignments} WHERE shift_id=%s",
                tuple(params + [int(shift_id)]),
            )
            # rowcount is 0 when values are unchanged; confirm existence instead.
            cur.execute("SELECT 1 AS found FROM shifts WHERE shift_id=%s", (int(shift_id),))
            return fetchone(cur) is not None

    def delete(self, *, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shifts WHERE shift_id=%s", (int(shift_id),))
            return cur.rowcount > 0

    def sum_scheduled_by_client(
        self,
        *,
        provider_id: int,
        start: datetime,
        end: datetime,
        worker_id: Optional[int] = None,
    ) -> Sequence[ClientHoursTotal]:
        clauses = [
            "s.service_provider_id=%s",
            "s.start_time >= %s",
            "s.start_time < %s",
            "n.client_id IS NOT NULL",
        ]
        params: list[object] = [int(provider_id), start, end]
        if worker_id is not None:
            clauses.append("s.support_worker_id=%s")
            params.append(int(worker_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.support_worker_id,
                    s.service_provider_id,
                    n.client_id,
                    COALESCE(SUM(TIMESTAMPDIFF(SECOND, s.start_time, s.end_time)), 0) AS scheduled_seconds
                FROM shifts s
                JOIN shift_notes n ON n.shift_id = s.shift_id
                WHERE {where}
                GROUP BY s.support_worker_id, s.service_provider_id, n.client_id
                """,
                tuple(params),
            )
            return [
                ClientHoursTotal(
                    support_worker_id=int(r["support_worker_id"]),
                    service_provider_id=int(r["service_provider_id"]),
                    client_id=str(r["client_id"]),
                    scheduled_seconds=int(r["scheduled_seconds"] or 0),
                )
                for r in fetchall(cur)
            ]

    # -------- Assignments --------
    def list_assignments(self, *, shift_id: int) -> Sequence[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, shift_id, support_worker_id, status, created_at
                FROM shift_assignments
                WHERE shift_id=%s
                ORDER BY assignment_id ASC
                """,
                (int(shift_id),),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def get_assignment(self, *, assignment_id: int) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, shift_id, support_worker_id, status, created_at
                FROM shift_assignments
                WHERE assignment_id=%s
                """,
                (int(assignment_id),),
            )
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def find_assignment(self, *, shift_id: int, worker_id: int) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, shift_id, support_worker_id, status, created_at
                FROM shift_assignments
                WHERE shift_id=%s AND support_worker_id=%s
                """,
                (int(shift_id), int(worker_id)),
            )
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def create_assignment(self, *, shift_id: int, worker_id: int, status: AssignmentStatus) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO shift_assignments(shift_id, support_worker_id, status)
                    VALUES(%s,%s,%s)
                    """,
                    (int(shift_id), int(worker_id), status.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.errors.IntegrityError:
            # uq_assignment_pair: someone assigned the same worker concurrently.
            return None

    def update_assignment_status(self, *, assignment_id: int, status: AssignmentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shift_assignments SET status=%s WHERE assignment_id=%s",
                (status.value, int(assignment_id)),
            )
            cur.execute("SELECT 1 AS found FROM shift_assignments WHERE assignment_id=%s", (int(assignment_id),))
            return fetchone(cur) is not None


class MySQLShiftNotesRepository(ShiftNotesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, shift_id: int) -> Optional[ShiftNotes]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, client_id, client_name, task_description, notes, special_requirements
                FROM shift_notes
                WHERE shift_id=%s
                """,
                (int(shift_id),),
            )
            r = fetchone(cur)
            return _row_to_notes(r) if r else None

    def get_many(self, *, shift_ids: Iterable[int]) -> Mapping[int, ShiftNotes]:
        ids = sorted({int(i) for i in shift_ids})
        if not ids:
            return {}
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT shift_id, client_id, client_name, task_description, notes, special_requirements
                FROM shift_notes
                WHERE shift_id IN ({placeholders})
                """,
                params,
            )
            return {int(r["shift_id"]): _row_to_notes(r) for r in fetchall(cur)}

    def upsert(self, notes: ShiftNotes) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_notes(shift_id, client_id, client_name, task_description, notes, special_requirements)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    client_id=VALUES(client_id),
                    client_name=VALUES(client_name),
                    task_description=VALUES(task_description),
                    notes=VALUES(notes),
                    special_requirements=VALUES(special_requirements)
                """,
                (
                    int(notes.shift_id),
                    notes.client_id,
                    notes.client_name,
                    notes.task_description,
                    notes.notes,
                    notes.special_requirements,
                ),
            )

    def delete(self, *, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shift_notes WHERE shift_id=%s", (int(shift_id),))
            return cur.rowcount > 0
