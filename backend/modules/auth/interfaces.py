"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks.
"""

from typing import Iterable, Optional, Protocol, runtime_checkable

from modules.media.models import MediaFile
from modules.users.models import SignupRequest

from .models import AdminAuthPayload, AuthPayload, Principal


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def signup(
        self,
        request: SignupRequest,
        picture: Optional[MediaFile] = None,
    ) -> AuthPayload:
        """
        Register a new user and issue a session token.

        Args:
            request: Registration fields
            picture: Optional profile picture to upload

        Returns:
            AuthPayload with the public user and a fresh token

        Raises:
            ValidationError: If any field is invalid
            DuplicateUserError: If the email or phone number is taken
        """
        ...

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthPayload:
        """
        Authenticate a stored user by email and password.

        Raises:
            ValidationError: If either value is missing
            InvalidCredentialsError: If the pair does not match
            InactiveAccountError: If the account is deactivated
        """
        ...

    async def admin_login(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> AdminAuthPayload:
        """Authenticate the configured administrator."""
        ...

    async def authenticate(self, token: str) -> Principal:
        """
        Resolve a bearer token to the principal it belongs to.

        Raises:
            InvalidTokenError: If the token is invalid or expired
            PrincipalUnavailableError: If the user is gone or deactivated
        """
        ...

    def authorize(self, principal: Principal, allowed_roles: Iterable[str]) -> Principal:
        """
        Check that a principal holds one of ``allowed_roles``.

        Raises:
            InsufficientPermissionsError: If it does not
        """
        ...
