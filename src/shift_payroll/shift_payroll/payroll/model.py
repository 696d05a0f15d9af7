from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..common.serialization import as_dict, to_json_value
from ..core.enums import PayslipItemType, PayslipStatus

VALID_TRANSITIONS: dict[PayslipStatus, frozenset[PayslipStatus]] = {
    PayslipStatus.DRAFT: frozenset({PayslipStatus.ISSUED}),
    PayslipStatus.ISSUED: frozenset({PayslipStatus.PAID}),
    PayslipStatus.PAID: frozenset(),
}


@dataclass(frozen=True)
class Payslip:
    """Pay for one worker over one period.

    ``gross_pay`` and ``net_pay`` are always derived from ``total_hours``,
    ``hourly_rate`` and ``deductions``; nothing writes them independently.
    """

    payslip_id: int
    support_worker_id: int
    service_provider_id: int
    pay_period_start: datetime
    pay_period_end: datetime
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayslipStatus = PayslipStatus.DRAFT
    issued_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class PayslipItem:
    item_id: int
    payslip_id: int
    item_type: PayslipItemType
    description: str
    amount: Decimal
    quantity: Optional[Decimal] = None
    rate: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class PayslipItemDraft:
    """Line item before it has an id (written together with its payslip)."""

    item_type: PayslipItemType
    description: str
    amount: Decimal
    quantity: Optional[Decimal] = None
    rate: Optional[Decimal] = None


@dataclass(frozen=True)
class PayslipDraft:
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    notes: Optional[str] = None
    items: Tuple[PayslipItemDraft, ...] = ()


@dataclass(frozen=True)
class PayFigures:
    gross_pay: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class PayslipSummary:
    total_payslips: int
    total_paid: Decimal
    total_pending: Decimal
    last_payslip: Optional[Payslip] = None

    def to_dict(self) -> dict:
        return as_dict(self)


@dataclass(frozen=True)
class PayslipDetail:
    """Payslip enriched with worker identity (and, for the detail view, its items)."""

    payslip: Payslip
    worker_name: str
    worker_email: Optional[str] = None
    items: Tuple[PayslipItem, ...] = field(default_factory=tuple)

    def to_dict(self, *, with_items: bool = True) -> dict:
        data = self.payslip.to_dict()
        data["worker_name"] = self.worker_name
        data["worker_email"] = self.worker_email
        if with_items:
            data["items"] = to_json_value(list(self.items))
        return data
