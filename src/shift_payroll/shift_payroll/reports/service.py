from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import end_of_day, start_of_day
from ..common.numbers import ZERO, round_hours
from ..core.constants import DEFAULT_COMPANY_NAME, DEFAULT_REPORT_DAYS, NOT_AVAILABLE
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .model import ShiftReportRow, ShiftReportSummary
from .repository import ReportRepository

logger = logging.getLogger(__name__)


class ReportService:
    """Compiles a provider's shift report for a date range.

    Each shift appears once. When a shift has several timesheets the earliest
    one (lowest timesheet id) supplies the clock figures.
    """

    def __init__(
        self,
        reports: ReportRepository,
        users: UserRepository,
        *,
        default_days: int = DEFAULT_REPORT_DAYS,
        today: Callable[[], date] = date.today,
    ):
        self._reports = reports
        self._users = users
        self._default_days = int(default_days)
        self._today = today

    def build_report(
        self,
        *,
        provider_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ShiftReportSummary:
        end_d = end_date or self._today()
        start_d = start_date or (end_d - timedelta(days=self._default_days))
        start = start_of_day(start_d)
        end = end_of_day(end_d)
        if start > end:
            raise ValidationError("Report start date must not be after its end date")

        logger.info("Generating shift report provider=%s start=%s end=%s", provider_id, start, end)
        query_rows = self._reports.get_shift_rows(provider_id=int(provider_id), start=start, end=end)

        seen: set[int] = set()
        worker_names: set[str] = set()
        rows: list[ShiftReportRow] = []

        for r in query_rows:
            if r.shift_id in seen or not r.worker_name:
                continue
            seen.add(r.shift_id)
            worker_names.add(r.worker_name)

            rows.append(
                ShiftReportRow(
                    worker_name=r.worker_name,
                    client_name=r.client_name or NOT_AVAILABLE,
                    shift_date=r.start_time.date(),
                    scheduled_start=r.start_time,
                    scheduled_end=r.end_time,
                    clock_in=r.clock_in,
                    clock_out=r.clock_out,
                    break_minutes=int(r.break_minutes or 0),
                    total_hours=round_hours(r.total_hours or ZERO),
                )
            )

        provider = self._users.get_by_id(int(provider_id))
        company_name = (provider.company_name if provider else None) or DEFAULT_COMPANY_NAME

        report = ShiftReportSummary(
            company_name=company_name,
            start_date=start,
            end_date=end,
            rows=tuple(rows),
            total_shifts=len(rows),
            total_hours=round_hours(sum((row.total_hours for row in rows), ZERO)),
            worker_names=frozenset(worker_names),
        )
        logger.info("Report compiled: %s shifts, %s h", report.total_shifts, report.total_hours)
        return report
