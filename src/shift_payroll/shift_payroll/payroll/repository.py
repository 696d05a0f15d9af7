from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import PayslipStatus
from ..timesheets.model import Timesheet
from .model import Payslip, PayslipDraft, PayslipItem

DraftBuilder = Callable[[Sequence[Timesheet]], PayslipDraft]


class PayslipRepository(Protocol):
    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list(
        self,
        *,
        provider_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        status: Optional[PayslipStatus] = None,
    ) -> Sequence[Payslip]:
        """Oldest first, ordered by (created_at, payslip_id)."""

        raise NotImplementedError

    def list_items(self, *, payslip_id: int) -> Sequence[PayslipItem]:
        raise NotImplementedError

    def create_from_timesheets(
        self,
        *,
        provider_id: int,
        worker_id: int,
        period_start: datetime,
        period_end: datetime,
        build: DraftBuilder,
    ) -> int:
        """In one transaction: lock the worker's approved timesheets whose
        start_time is within ``[period_start, period_end]``, hand them to
        ``build`` and persist the resulting draft payslip with its items.
        """

        raise NotImplementedError

    def update_draft(self, *, payslip_id: int, draft: PayslipDraft) -> bool:
        """Rewrite figures, notes and every line item of a draft payslip atomically.

        Returns False when the payslip is no longer a draft.
        """

        raise NotImplementedError

    def mark_issued(self, *, payslip_id: int, issued_date: datetime) -> bool:
        raise NotImplementedError

    def mark_paid(self, *, payslip_id: int, paid_date: datetime) -> bool:
        raise NotImplementedError

    def delete_draft(self, *, payslip_id: int) -> bool:
        raise NotImplementedError
