class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or there is no session."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ScopeMismatchError(DomainError):
    """Raised when a batch references students outside the target cohort.

    The whole batch is rejected; ``ids`` lists the offending student ids.
    """

    def __init__(self, message: str, ids=()):
        super().__init__(message)
        self.ids = tuple(ids)


class StoreError(DomainError):
    """Raised when the underlying store fails. Safe to retry the whole operation."""

    retryable = True
