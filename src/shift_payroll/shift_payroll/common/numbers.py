from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..core.constants import HOURS_QUANTUM, MONEY_QUANTUM
from ..core.exceptions import ValidationError

ZERO = Decimal("0")


def to_decimal(value, field_name: str, *, allow_negative: bool = False) -> Decimal:
    """Parse a money/hours input (str, int, float or Decimal)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    if number < 0 and not allow_negative:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def round_hours(value: Decimal) -> Decimal:
    return Decimal(value).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def seconds_to_hours(seconds) -> Decimal:
    return round_hours(Decimal(str(seconds or 0)) / Decimal(3600))
