from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from ...timesheets.model import Timesheet
from ..model import PayFigures


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def total_hours(self, timesheets: Iterable[Timesheet]) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def pay(self, total_hours: Decimal, hourly_rate: Decimal, deductions: Decimal) -> PayFigures:
        raise NotImplementedError
