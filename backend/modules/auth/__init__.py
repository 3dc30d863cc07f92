"""
Authentication module.

Handles signup, login, session tokens and the configured admin principal.

Public API:
- IAuthService: Interface for auth operations
- UserPrincipal, AdminPrincipal, Principal: Request identities
- AuthPayload, AdminAuthPayload: Login results
- Auth exceptions: InvalidTokenError, InvalidCredentialsError, etc.
"""

from .interfaces import IAuthService
from .models import (
    ADMIN_PRINCIPAL_ID,
    AdminAuthPayload,
    AdminPrincipal,
    AdminProfile,
    AuthPayload,
    Principal,
    TokenClaims,
    UserPrincipal,
)
from .exceptions import (
    AdminNotConfiguredError,
    AuthNotConfiguredError,
    InactiveAccountError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    PrincipalUnavailableError,
    UserAccountRequiredError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "ADMIN_PRINCIPAL_ID",
    "AdminAuthPayload",
    "AdminPrincipal",
    "AdminProfile",
    "AuthPayload",
    "Principal",
    "TokenClaims",
    "UserPrincipal",
    # Exceptions
    "AdminNotConfiguredError",
    "AuthNotConfiguredError",
    "InactiveAccountError",
    "InsufficientPermissionsError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
    "PrincipalUnavailableError",
    "UserAccountRequiredError",
]
