from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from ..common.datetime_utils import end_of_day, now_local, start_of_day
from ..common.numbers import ZERO, round_money, to_decimal
from ..common.validators import optional_strip, require_transition
from ..core.constants import UNKNOWN_NAME
from ..core.enums import PayslipItemType, PayslipStatus
from ..core.exceptions import NotFoundError, StateConflictError, ValidationError
from ..relationships.guard import RelationshipGuard
from ..timesheets.model import Timesheet
from ..users.repository import UserRepository
from .calculator.base import PayCalculator
from .calculator.standard_calculator import StandardPayCalculator
from .model import (
    VALID_TRANSITIONS,
    Payslip,
    PayslipDetail,
    PayslipDraft,
    PayslipItem,
    PayslipItemDraft,
    PayslipSummary,
)
from .repository import PayslipRepository

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


def _hours_item(description: str, total_hours: Decimal, rate: Decimal, gross: Decimal) -> PayslipItemDraft:
    return PayslipItemDraft(
        item_type=PayslipItemType.SHIFT_HOURS,
        description=description,
        quantity=total_hours,
        rate=rate,
        amount=gross,
    )


def _deduction_item(deductions: Decimal) -> PayslipItemDraft:
    return PayslipItemDraft(item_type=PayslipItemType.DEDUCTION, description="Deductions", amount=deductions)


class PayslipService:
    def __init__(
        self,
        payslips: PayslipRepository,
        users: UserRepository,
        guard: RelationshipGuard,
        *,
        calculator: Optional[PayCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payslips = payslips
        self._users = users
        self._guard = guard
        self._calculator = calculator or StandardPayCalculator()
        self._clock = clock

    def _get(self, payslip_id: int) -> Payslip:
        payslip = self._payslips.get_by_id(int(payslip_id))
        if not payslip:
            raise NotFoundError("Payslip not found")
        return payslip

    def _owned(self, payslip_id: int, provider_id: int) -> Payslip:
        payslip = self._get(payslip_id)
        self._guard.ensure_owner(provider_id, payslip.service_provider_id, "payslip")
        return payslip

    def generate(
        self,
        *,
        provider_id: int,
        worker_id: int,
        period_start: DateLike,
        period_end: DateLike,
        hourly_rate,
        deductions=0,
        notes: Optional[str] = None,
    ) -> Payslip:
        # Existence only: payslips may still be issued to a worker whose link is inactive.
        self._guard.authorize(provider_id, worker_id)

        start = start_of_day(period_start)
        end = end_of_day(period_end)
        if end < start:
            raise ValidationError("Pay period end must not be before its start")

        rate = round_money(to_decimal(hourly_rate, "hourly_rate"))
        deduction_amount = round_money(to_decimal(deductions if deductions is not None else 0, "deductions"))
        notes = optional_strip(notes)

        def build(timesheets: Sequence[Timesheet]) -> PayslipDraft:
            total_hours = self._calculator.total_hours(timesheets)
            figures = self._calculator.pay(total_hours, rate, deduction_amount)
            items = [_hours_item(f"Hours worked ({len(timesheets)} shifts)", total_hours, rate, figures.gross_pay)]
            if deduction_amount > ZERO:
                items.append(_deduction_item(deduction_amount))
            return PayslipDraft(
                total_hours=total_hours,
                hourly_rate=rate,
                gross_pay=figures.gross_pay,
                deductions=deduction_amount,
                net_pay=figures.net_pay,
                notes=notes,
                items=tuple(items),
            )

        payslip_id = self._payslips.create_from_timesheets(
            provider_id=int(provider_id),
            worker_id=int(worker_id),
            period_start=start,
            period_end=end,
            build=build,
        )
        payslip = self._get(payslip_id)
        logger.info(
            "Generated payslip %s for worker=%s provider=%s: %s h, net %s",
            payslip_id,
            worker_id,
            provider_id,
            payslip.total_hours,
            payslip.net_pay,
        )
        return payslip

    def update(
        self,
        *,
        payslip_id: int,
        provider_id: int,
        hourly_rate=None,
        deductions=None,
        notes: Optional[str] = None,
    ) -> Payslip:
        """Draft-only edit. Figures are recomputed from the stored total_hours;
        timesheets are not re-selected."""
        payslip = self._owned(payslip_id, provider_id)
        if payslip.status != PayslipStatus.DRAFT:
            raise StateConflictError("Only draft payslips can be updated")

        rate = round_money(to_decimal(hourly_rate, "hourly_rate")) if hourly_rate is not None else payslip.hourly_rate
        deduction_amount = (
            round_money(to_decimal(deductions, "deductions")) if deductions is not None else payslip.deductions
        )
        figures = self._calculator.pay(payslip.total_hours, rate, deduction_amount)

        existing = self._payslips.list_items(payslip_id=payslip.payslip_id)
        items = []
        for item in existing:
            if item.item_type == PayslipItemType.SHIFT_HOURS:
                items.append(_hours_item(item.description, payslip.total_hours, rate, figures.gross_pay))
            elif item.item_type != PayslipItemType.DEDUCTION:
                items.append(
                    PayslipItemDraft(
                        item_type=item.item_type,
                        description=item.description,
                        amount=item.amount,
                        quantity=item.quantity,
                        rate=item.rate,
                    )
                )
        if not any(i.item_type == PayslipItemType.SHIFT_HOURS for i in items):
            items.insert(0, _hours_item("Hours worked", payslip.total_hours, rate, figures.gross_pay))
        if deduction_amount > ZERO:
            items.append(_deduction_item(deduction_amount))

        draft = PayslipDraft(
            total_hours=payslip.total_hours,
            hourly_rate=rate,
            gross_pay=figures.gross_pay,
            deductions=deduction_amount,
            net_pay=figures.net_pay,
            notes=optional_strip(notes) if notes is not None else payslip.notes,
            items=tuple(items),
        )
        if not self._payslips.update_draft(payslip_id=payslip.payslip_id, draft=draft):
            raise StateConflictError("Only draft payslips can be updated")

        logger.info("Updated draft payslip %s: rate=%s deductions=%s", payslip.payslip_id, rate, deduction_amount)
        return self._get(payslip.payslip_id)

    def issue(self, *, payslip_id: int, provider_id: int, now: Optional[datetime] = None) -> Payslip:
        payslip = self._owned(payslip_id, provider_id)
        require_transition(VALID_TRANSITIONS, payslip.status, PayslipStatus.ISSUED, "Payslip")
        if not self._payslips.mark_issued(payslip_id=payslip.payslip_id, issued_date=now or self._clock()):
            raise StateConflictError("Payslip status changed concurrently, reload and retry")
        logger.info("Payslip %s issued", payslip.payslip_id)
        return self._get(payslip.payslip_id)

    def mark_paid(self, *, payslip_id: int, provider_id: int, now: Optional[datetime] = None) -> Payslip:
        payslip = self._owned(payslip_id, provider_id)
        require_transition(VALID_TRANSITIONS, payslip.status, PayslipStatus.PAID, "Payslip")
        if not self._payslips.mark_paid(payslip_id=payslip.payslip_id, paid_date=now or self._clock()):
            raise StateConflictError("Payslip status changed concurrently, reload and retry")
        logger.info("Payslip %s marked paid", payslip.payslip_id)
        return self._get(payslip.payslip_id)

    def delete(self, *, payslip_id: int, provider_id: int) -> None:
        payslip = self._owned(payslip_id, provider_id)
        if payslip.status != PayslipStatus.DRAFT:
            raise StateConflictError("Only draft payslips can be deleted")
        if not self._payslips.delete_draft(payslip_id=payslip.payslip_id):
            raise StateConflictError("Only draft payslips can be deleted")
        logger.info("Deleted draft payslip %s", payslip.payslip_id)

    def summary(self, *, worker_id: int, provider_id: int) -> PayslipSummary:
        self._guard.authorize(provider_id, worker_id)
        payslips = self._payslips.list(provider_id=int(provider_id), worker_id=int(worker_id))

        total_paid = sum((p.net_pay for p in payslips if p.status == PayslipStatus.PAID), ZERO)
        total_pending = sum((p.net_pay for p in payslips if p.status == PayslipStatus.ISSUED), ZERO)
        last = max(payslips, key=lambda p: (p.created_at or datetime.min, p.payslip_id), default=None)
        return PayslipSummary(
            total_payslips=len(payslips),
            total_paid=round_money(total_paid),
            total_pending=round_money(total_pending),
            last_payslip=last,
        )

    def get_detail(self, *, payslip_id: int, actor_id: int) -> PayslipDetail:
        payslip = self._get(payslip_id)
        self._guard.ensure_party(
            actor_id,
            provider_id=payslip.service_provider_id,
            worker_id=payslip.support_worker_id,
            what="payslip",
        )
        worker = self._users.get_by_id(payslip.support_worker_id)
        items: Sequence[PayslipItem] = self._payslips.list_items(payslip_id=payslip.payslip_id)
        return PayslipDetail(
            payslip=payslip,
            worker_name=worker.full_name if worker else UNKNOWN_NAME,
            worker_email=worker.email if worker else None,
            items=tuple(items),
        )

    def list(
        self,
        *,
        provider_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        status: Optional[PayslipStatus] = None,
    ) -> Sequence[PayslipDetail]:
        if provider_id is None and worker_id is None:
            raise ValidationError("provider_id or worker_id is required")

        payslips = self._payslips.list(provider_id=provider_id, worker_id=worker_id, status=status)
        users = self._users.get_many({p.support_worker_id for p in payslips})
        result = []
        for p in payslips:
            worker = users.get(p.support_worker_id)
            result.append(
                PayslipDetail(
                    payslip=p,
                    worker_name=worker.full_name if worker else UNKNOWN_NAME,
                    worker_email=worker.email if worker else None,
                )
            )
        return result
