"""Domain errors. Each carries the HTTP status the API renders it with."""
from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base error. Rendered as {"message": ...} with status_code."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range input. errors is a list of {path, message}."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[list[dict]] = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidStatus(ValidationError):
    default_message = "Invalid status"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid email or password"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Uniqueness or state conflict. The API reports these as 400."""

    status_code = 400
    default_message = "Conflict"


class DuplicateApplication(ConflictError):
    default_message = "Already applied to this trial"


class ApplicationClosed(ConflictError):
    default_message = "Application has already been decided"
