"""Domain exceptions shared by services and routers.

Each exception carries the HTTP status it maps to so a single handler in
``promptlib.main`` can render them.
"""
from typing import Any


class PromptLibError(Exception):
    """Base exception for all application errors."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PromptLibError):
    """Raised when input is malformed or out of range."""

    status_code = 400
    default_message = "Validation Error"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class AuthenticationError(PromptLibError):
    """Raised when the caller has no valid identity."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(PromptLibError):
    """Raised when a valid identity may not perform the action."""

    status_code = 403
    default_message = "Forbidden"


class ProfileRequiredError(AuthorizationError):
    """Raised when an authenticated identity has not registered a profile."""

    default_message = "A profile is required for this action"


class NotFoundError(PromptLibError):
    """Raised when the requested entity does not exist or is hidden."""

    status_code = 404
    default_message = "Not Found"


class ConflictError(PromptLibError):
    """Raised when a write collides with an existing record."""

    status_code = 409
    default_message = "Conflict"


class StoreError(PromptLibError):
    """Raised when the persistence layer fails. Details are logged, never returned."""

    status_code = 500
    default_message = "Internal Server Error"
