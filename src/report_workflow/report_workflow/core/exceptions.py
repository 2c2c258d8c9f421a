class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class TransitionRejected(ValidationError):
    """Raised by the status machine when a transition request is malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced report or user does not exist."""
