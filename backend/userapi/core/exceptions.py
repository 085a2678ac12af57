from typing import Optional


class DomainError(Exception):
    """Base exception for user lifecycle failures.

    Each subclass carries the HTTP status it is reported with.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Raised when input is missing or malformed."""

    status_code = 400
    default_message = "invalid input"


class ConflictError(DomainError):
    """Raised when a username is already taken."""

    status_code = 409
    default_message = "username already exists"


class NotFoundError(DomainError):
    """Raised when no user matches the identifier."""

    status_code = 404
    default_message = "not found"


class InternalError(DomainError):
    """Raised for data store or other unexpected failures."""
