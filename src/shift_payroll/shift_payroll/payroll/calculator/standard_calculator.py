from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ...common.numbers import ZERO, round_hours, round_money
from ...timesheets.model import Timesheet
from ..model import PayFigures
from .base import PayCalculator


class StandardPayCalculator(PayCalculator):
    """Standard rule: flat rate, gross = hours x rate, net = gross - deductions.

    Timesheets without stored hours (never clocked out) count as 0.
    """

    def total_hours(self, timesheets: Iterable[Timesheet]) -> Decimal:
        return round_hours(sum((ts.total_hours or ZERO for ts in timesheets), ZERO))

    def pay(self, total_hours: Decimal, hourly_rate: Decimal, deductions: Decimal) -> PayFigures:
        gross = round_money(Decimal(total_hours) * Decimal(hourly_rate))
        net = round_money(gross - Decimal(deductions))
        return PayFigures(gross_pay=gross, net_pay=net)
