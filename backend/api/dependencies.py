"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Tests swap implementations with ``app.dependency_overrides`` or by
resetting the container.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.admin import AdminPrincipalResolver
    from modules.auth.interfaces import IAuthService
    from modules.auth.passwords import PasswordHasher
    from modules.auth.tokens import TokenService
    from modules.media.interfaces import IMediaService
    from modules.users.interfaces import IUserRepository
    from modules.users.service import UserService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._user_repository: "IUserRepository | None" = None
        self._tokens: "TokenService | None" = None
        self._hasher: "PasswordHasher | None" = None
        self._admin: "AdminPrincipalResolver | None" = None
        self._media: "IMediaService | None" = None
        self._auth_service: "IAuthService | None" = None
        self._user_service: "UserService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def user_repository(self) -> "IUserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            from modules.users.repository import UserRepository
            from shared.database import get_supabase_client
            self._user_repository = UserRepository(
                get_supabase_client(), table=self.settings.users_table
            )
        return self._user_repository

    @property
    def tokens(self) -> "TokenService":
        if self._tokens is None:
            from modules.auth.tokens import TokenService
            self._tokens = TokenService(self.settings.auth_config())
        return self._tokens

    @property
    def hasher(self) -> "PasswordHasher":
        if self._hasher is None:
            from modules.auth.passwords import PasswordHasher
            self._hasher = PasswordHasher(rounds=self.settings.bcrypt_rounds)
        return self._hasher

    @property
    def admin(self) -> "AdminPrincipalResolver":
        if self._admin is None:
            from modules.auth.admin import AdminPrincipalResolver
            self._admin = AdminPrincipalResolver(self.settings.auth_config())
        return self._admin

    @property
    def media(self) -> "IMediaService":
        """Get the media service instance."""
        if self._media is None:
            from modules.media.service import CloudinaryMediaService
            settings = self.settings
            self._media = CloudinaryMediaService(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                timeout=settings.upload_timeout,
            )
        return self._media

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                repository=self.user_repository,
                tokens=self.tokens,
                hasher=self.hasher,
                admin=self.admin,
                media=self.media,
            )
        return self._auth_service

    @property
    def users(self) -> "UserService":
        """Get the user service instance."""
        if self._user_service is None:
            from modules.users.service import UserService
            self._user_service = UserService(
                repository=self.user_repository,
                media=self.media,
            )
        return self._user_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._settings = None
        self._user_repository = None
        self._tokens = None
        self._hasher = None
        self._admin = None
        self._media = None
        self._auth_service = None
        self._user_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_user_service() -> "UserService":
    """FastAPI dependency for user service."""
    return get_container().users
