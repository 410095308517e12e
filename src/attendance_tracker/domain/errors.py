"""Errors raised to synchronous callers."""


class AttendanceError(Exception):
    """Base class for caller-facing errors."""


class PermissionDeniedError(AttendanceError):
    """Raised when the caller lacks the required privilege."""


class InvalidArgumentError(AttendanceError):
    """Raised when a required field is missing or violates an invariant."""


class TransactionConflictError(RuntimeError):
    """Raised when an atomic update keeps losing to concurrent writers."""
