class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class AuthenticationError(DomainError):
    """Raised when no caller identity is present in the session."""

    kind = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when the caller has no relationship with, or does not own, the target."""

    kind = "authorization_error"


class NotFoundError(DomainError):
    """Raised when a referenced shift/timesheet/payslip id does not exist."""

    kind = "not_found"


class StateConflictError(DomainError):
    """Raised when an operation is attempted from a state that forbids it."""

    kind = "state_conflict"
