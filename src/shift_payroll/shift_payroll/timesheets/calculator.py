from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.numbers import seconds_to_hours
from ..core.exceptions import ValidationError


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked hours)."""

    @abstractmethod
    def total_hours(self, start_time: datetime, end_time: Optional[datetime], break_minutes: int) -> Optional[Decimal]:
        raise NotImplementedError


class StandardHoursCalculator(HoursCalculator):
    """Standard rule: (out - in) - break_minutes, not below 0, rounded to 0.01h."""

    def total_hours(self, start_time: datetime, end_time: Optional[datetime], break_minutes: int) -> Optional[Decimal]:
        if end_time is None:
            return None
        if end_time < start_time:
            raise ValidationError("end_time must not be before start_time")
        seconds = (end_time - start_time).total_seconds() - int(break_minutes or 0) * 60
        return seconds_to_hours(max(seconds, 0))
