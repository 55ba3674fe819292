class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DegenerateInputError(ValidationError):
    """Raised when a landmark vector has no spread or no magnitude."""


class DimensionMismatchError(ValidationError):
    """Raised when two vectors that must be compared differ in length."""


class NotFoundError(DomainError):
    """Raised when a course, session, student or template does not exist."""


class ConflictError(DomainError):
    """Raised when a concurrent session update could not be applied in time."""
