class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTimeError(ValidationError):
    """Raised when a supplied instant violates an ordering constraint."""


class NotFoundError(DomainError):
    """Raised when the requested entity does not exist."""


class CategoryNotFoundError(NotFoundError):
    """Raised when a category is missing or has been deleted."""


class NoActiveSessionError(DomainError):
    """Raised when an operation needs an open session entry and there is none."""


class AuthenticationError(DomainError):
    """Raised when the caller cannot be resolved to a user."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class UserNotActiveError(AuthorizationError):
    """Raised when the acting or target user is disabled or deleted."""
