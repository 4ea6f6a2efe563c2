class DomainError(Exception):
    """Base exception for business rule violations.

    Domain errors are expected and recoverable; the message is safe to show.
    """


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when the acting user lacks permission for an action."""


class AlreadyCheckedIn(DomainError):
    """Raised when a check-in already exists for the employee's day."""


class AlreadyCheckedOut(DomainError):
    """Raised when the employee has already checked out for the day."""


class NotCheckedIn(DomainError):
    """Raised on check-out without a check-in for the day."""


class InvalidRange(DomainError):
    """Raised when a query range ends before it starts."""


class RecordConflict(DomainError):
    """Raised by stores when the (employee, day) uniqueness is violated."""


class StorageError(Exception):
    """Infrastructure failure (connectivity, timeout, driver error).

    Not a DomainError: callers retry or report it, the engine never does.
    """
