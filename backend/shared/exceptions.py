"""
Base exception classes for the Userbase backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to an HTTP status code, so subclasses
only need to pick the right parent.
"""

from typing import Optional, Any


class UserbaseError(Exception):
    """
    Base exception for all Userbase errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(UserbaseError):
    """Resource not found."""

    status_code = 404


class ValidationError(UserbaseError):
    """
    Input validation failed.

    Carries one message per invalid field so callers can report
    every problem at once instead of only the first.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[list[str]] = None,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.errors = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.errors:
            result["errors"] = self.errors
        return result


class DuplicateError(ValidationError):
    """A unique constraint would be (or was) violated."""

    pass


class AuthenticationError(UserbaseError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(UserbaseError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class ConfigurationError(UserbaseError):
    """
    Required configuration is missing.

    Messages must never include the secret values themselves.
    """

    status_code = 500


class ExternalServiceError(UserbaseError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
