from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PayslipItemType, PayslipStatus, TimesheetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from ..timesheets.mysql_timesheet_repository import TIMESHEET_COLUMNS, row_to_timesheet
from .model import Payslip, PayslipDraft, PayslipItem
from .repository import DraftBuilder, PayslipRepository

_PAYSLIP_COLUMNS = """
    payslip_id, support_worker_id, service_provider_id, pay_period_start, pay_period_end,
    total_hours, hourly_rate, gross_pay, deductions, net_pay, status,
    issued_date, paid_date, notes, created_at
"""


def _row_to_payslip(r: dict) -> Payslip:
    return Payslip(
        payslip_id=int(r["payslip_id"]),
        support_worker_id=int(r["support_worker_id"]),
        service_provider_id=int(r["service_provider_id"]),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        total_hours=r["total_hours"],
        hourly_rate=r["hourly_rate"],
        gross_pay=r["gross_pay"],
        deductions=r["deductions"],
        net_pay=r["net_pay"],
        status=PayslipStatus(r["status"]),
        issued_date=r.get("issued_date"),
        paid_date=r.get("paid_date"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


def _row_to_item(r: dict) -> PayslipItem:
    return PayslipItem(
        item_id=int(r["item_id"]),
        payslip_id=int(r["payslip_id"]),
        item_type=PayslipItemType(r["item_type"]),
        description=r["description"],
        amount=r["amount"],
        quantity=r.get("quantity"),
        rate=r.get("rate"),
    )


def _insert_items(cur, payslip_id: int, draft: PayslipDraft) -> None:
    for item in draft.items:
        cur.execute(
            """
            INSERT INTO payslip_items(payslip_id, item_type, description, quantity, rate, amount)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(payslip_id), item.item_type.value, item.description, item.quantity, item.rate, item.amount),
        )


class MySQLPayslipRepository(PayslipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYSLIP_COLUMNS} FROM payslips WHERE payslip_id=%s", (int(payslip_id),))
            r = fetchone(cur)
            return _row_to_payslip(r) if r else None

    def list(
        self,
        *,
        provider_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        status: Optional[PayslipStatus] = None,
    ) -> Sequence[Payslip]:
        where, params = build_where(
            {"service_provider_id": provider_id, "support_worker_id": worker_id, "status": status}
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYSLIP_COLUMNS}
                FROM payslips
                WHERE {where}
                ORDER BY created_at ASC, payslip_id ASC
                """,
                tuple(params),
            )
            return [_row_to_payslip(r) for r in fetchall(cur)]

    def list_items(self, *, payslip_id: int) -> Sequence[PayslipItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT item_id, payslip_id, item_type, description, quantity, rate, amount
                FROM payslip_items
                WHERE payslip_id=%s
                ORDER BY item_id ASC
                """,
                (int(payslip_id),),
            )
            return [_row_to_item(r) for r in fetchall(cur)]

    def create_from_timesheets(
        self,
        *,
        provider_id: int,
        worker_id: int,
        period_start: datetime,
        period_end: datetime,
        build: DraftBuilder,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # Share locks keep the selected rows approved until the payslip commits.
            cur.execute(
                f"""
                SELECT {TIMESHEET_COLUMNS}
                FROM timesheets
                WHERE support_worker_id=%s
                  AND status=%s
                  AND start_time >= %s
                  AND start_time <= %s
                ORDER BY start_time ASC, timesheet_id ASC
                FOR SHARE
                """,
                (int(worker_id), TimesheetStatus.APPROVED.value, period_start, period_end),
            )
            timesheets = [row_to_timesheet(r) for r in fetchall(cur)]
            draft = build(timesheets)

            cur.execute(
                """
                INSERT INTO payslips(
                    support_worker_id, service_provider_id, pay_period_start, pay_period_end,
                    total_hours, hourly_rate, gross_pay, deductions, net_pay, status, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(worker_id),
                    int(provider_id),
                    period_start,
                    period_end,
                    draft.total_hours,
                    draft.hourly_rate,
                    draft.gross_pay,
                    draft.deductions,
                    draft.net_pay,
                    PayslipStatus.DRAFT.value,
                    draft.notes,
                ),
            )
            payslip_id = int(cur.lastrowid)
            _insert_items(cur, payslip_id, draft)
            return payslip_id

    def update_draft(self, *, payslip_id: int, draft: PayslipDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status FROM payslips WHERE payslip_id=%s FOR UPDATE", (int(payslip_id),))
            r = fetchone(cur)
            if not r or r["status"] != PayslipStatus.DRAFT.value:
                return False

            cur.execute(
                """
                UPDATE payslips
                SET hourly_rate=%s, gross_pay=%s, deductions=%s, net_pay=%s, notes=%s
                WHERE payslip_id=%s
                """,
                (
                    draft.hourly_rate,
                    draft.gross_pay,
                    draft.deductions,
                    draft.net_pay,
                    draft.notes,
                    int(payslip_id),
                ),
            )
            cur.execute("DELETE FROM payslip_items WHERE payslip_id=%s", (int(payslip_id),))
            _insert_items(cur, payslip_id, draft)
            return True

    def mark_issued(self, *, payslip_id: int, issued_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payslips SET status=%s, issued_date=%s WHERE payslip_id=%s AND status=%s",
                (PayslipStatus.ISSUED.value, issued_date, int(payslip_id), PayslipStatus.DRAFT.value),
            )
            return cur.rowcount == 1

    def mark_paid(self, *, payslip_id: int, paid_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payslips SET status=%s, paid_date=%s WHERE payslip_id=%s AND status=%s",
                (PayslipStatus.PAID.value, paid_date, int(payslip_id), PayslipStatus.ISSUED.value),
            )
            return cur.rowcount == 1

    def delete_draft(self, *, payslip_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status FROM payslips WHERE payslip_id=%s FOR UPDATE", (int(payslip_id),))
            r = fetchone(cur)
            if not r or r["status"] != PayslipStatus.DRAFT.value:
                return False

            cur.execute("DELETE FROM payslip_items WHERE payslip_id=%s", (int(payslip_id),))
            cur.execute("DELETE FROM payslips WHERE payslip_id=%s", (int(payslip_id),))
            return cur.rowcount == 1
