from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role stored in the session by the external login flow."""

    SERVICE_PROVIDER = "service_provider"
    SUPPORT_WORKER = "support_worker"


class ShiftStatus(str, Enum):
    """Open, caller-controlled shift lifecycle (no transition table)."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"


class TimesheetStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayslipStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"


class PayslipItemType(str, Enum):
    SHIFT_HOURS = "shift_hours"
    OVERTIME = "overtime"
    ALLOWANCE = "allowance"
    DEDUCTION = "deduction"
    TAX = "tax"
    OTHER = "other"


class RelationshipStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
