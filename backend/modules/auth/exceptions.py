"""
Authentication module exceptions.

These exceptions are raised by the auth module and caught by the API
error handlers to return appropriate HTTP responses. Token failures are
deliberately not broken down further than "invalid or expired".
"""

from typing import Iterable

from shared.exceptions import AuthenticationError, AuthorizationError, ConfigurationError


class InvalidTokenError(AuthenticationError):
    """Raised when a token is malformed, badly signed, or expired."""

    def __init__(self, message: str = "Token is invalid or expired"):
        super().__init__(message, code="INVALID_TOKEN")


class MissingTokenError(AuthenticationError):
    """Raised when no bearer token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class PrincipalUnavailableError(AuthenticationError):
    """Raised when a token's user was deleted or deactivated."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found or account deactivated",
            code="PRINCIPAL_UNAVAILABLE",
            details={"user_id": user_id},
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised on a failed login. The message never says which part was wrong."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InactiveAccountError(AuthenticationError):
    """Raised when a deactivated user tries to log in."""

    def __init__(self):
        super().__init__(
            "Account is deactivated. Please contact support.",
            code="ACCOUNT_DEACTIVATED",
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks required permissions."""

    def __init__(self, required_roles: Iterable[str], user_role: str):
        required = ", ".join(sorted(required_roles))
        super().__init__(
            f"Insufficient permissions. Required: {required}, has: {user_role}",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_roles": required, "user_role": user_role},
        )


class AuthNotConfiguredError(ConfigurationError):
    """Raised when the signing secret is missing."""

    def __init__(self):
        super().__init__(
            "Server authentication not configured",
            code="AUTH_NOT_CONFIGURED",
        )


class AdminNotConfiguredError(ConfigurationError):
    """Raised when the admin email/password pair is missing."""

    def __init__(self):
        super().__init__("Admin configuration error", code="ADMIN_NOT_CONFIGURED")


class UserAccountRequiredError(AuthorizationError):
    """Raised when the admin principal calls a self-service endpoint."""

    def __init__(self):
        super().__init__(
            "This action requires a user account",
            code="USER_ACCOUNT_REQUIRED",
        )
