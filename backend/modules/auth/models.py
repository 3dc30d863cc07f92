"""
Authentication module data models.

A Principal is the identity attached to a request. It is a tagged union of
UserPrincipal (backed by a stored record) and AdminPrincipal (the
config-driven administrator that is never stored). Authorization code
branches on the type, never on the id string.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, Field

from modules.users.models import CamelModel, PublicUser, Role

# Fixed id carried in admin tokens; no stored record ever has it
ADMIN_PRINCIPAL_ID = "admin"


class UserPrincipal(BaseModel):
    """An authenticated user loaded from the credential store."""

    kind: Literal["user"] = "user"
    id: str = Field(..., description="User record id")
    email: str = Field(..., description="User's email address")
    role: Role = Field(default=Role.USER, description="Role from the user record")

    model_config = {"frozen": True}


class AdminPrincipal(BaseModel):
    """The configured administrator."""

    kind: Literal["admin"] = "admin"
    id: Literal["admin"] = ADMIN_PRINCIPAL_ID
    email: str = Field(..., description="Configured admin email")
    role: Literal[Role.ADMIN] = Role.ADMIN
    first_name: str = "Admin"
    last_name: str = "User"

    model_config = {"frozen": True}


Principal = Union[UserPrincipal, AdminPrincipal]


class TokenClaims(BaseModel):
    """
    Decoded session token payload.

    User tokens only carry ``sub``; admin tokens add ``email`` and ``role``.
    """

    sub: str = Field(..., description="Principal id")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")
    email: Optional[str] = Field(None, description="Admin email")
    role: Optional[Role] = Field(None, description="Admin role")

    model_config = {"extra": "ignore"}

    @property
    def is_admin(self) -> bool:
        return self.sub == ADMIN_PRINCIPAL_ID


class AuthPayload(CamelModel):
    """Returned by signup and login."""

    user: PublicUser
    token: str


class AdminProfile(CamelModel):
    """Public view of the admin principal."""

    id: str = ADMIN_PRINCIPAL_ID
    email: str
    role: Role = Role.ADMIN
    first_name: str = "Admin"
    last_name: str = "User"

    @classmethod
    def from_principal(cls, principal: AdminPrincipal) -> "AdminProfile":
        return cls(
            email=principal.email,
            first_name=principal.first_name,
            last_name=principal.last_name,
        )


class AdminAuthPayload(CamelModel):
    """Returned by admin login."""

    token: str
    user: AdminProfile
