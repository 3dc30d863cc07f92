"""
Bearer token authentication dependencies.

Resolves the ``Authorization: Bearer <token>`` header to a Principal and
enforces role restrictions. Failures are raised as module exceptions and
turned into envelope responses by the app's exception handlers.
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modules.auth.exceptions import MissingTokenError, UserAccountRequiredError
from modules.auth.interfaces import IAuthService
from modules.auth.models import Principal, UserPrincipal
from modules.users.models import Role

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: IAuthService = Depends(get_auth_service),
) -> Principal:
    """
    Dependency that requires authentication.

    The principal is also stored on ``request.state.principal``.

    Usage:
        @router.get("/protected")
        async def protected_route(principal: Principal = Depends(get_current_principal)):
            return {"id": principal.id}
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    principal = await auth.authenticate(credentials.credentials)
    request.state.principal = principal
    return principal


async def get_current_user(
    principal: Principal = Depends(get_current_principal),
) -> UserPrincipal:
    """
    Dependency for self-service endpoints that need a stored user.

    The admin principal has no record to edit, so it is refused here.
    """
    if not isinstance(principal, UserPrincipal):
        raise UserAccountRequiredError()
    return principal


def require_roles(*roles: Role) -> Callable:
    """
    Build a dependency that admits only principals holding one of ``roles``.

    Usage:
        @router.get("/admin-only", dependencies=[Depends(require_roles(Role.ADMIN))])
    """

    async def check(
        principal: Principal = Depends(get_current_principal),
        auth: IAuthService = Depends(get_auth_service),
    ) -> Principal:
        return auth.authorize(principal, roles)

    return check


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_principal)
RequireUser = Depends(get_current_user)
RequireAdmin = Depends(require_roles(Role.ADMIN))
