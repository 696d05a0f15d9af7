from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Type, TypeVar

from ..core.exceptions import StateConflictError, ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_non_negative_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def require_enum(enum_type: Type[E], value, field_name: str) -> E:
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_type)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_transition(
    transitions: Mapping[E, frozenset],
    current: E,
    target: E,
    what: str,
) -> None:
    if target not in transitions.get(current, frozenset()):
        raise StateConflictError(f"{what} cannot move from {current.value} to {target.value}")


def optional_strip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None
