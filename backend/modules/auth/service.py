"""
Authentication service implementation.

Signup, login and bearer-token resolution over the credential store.
Passwords are hashed with bcrypt off the event loop; session tokens are
signed JWTs (see tokens.py).
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from modules.media.interfaces import IMediaService
from modules.media.models import MediaFile, MediaUpload
from modules.media.service import upload_profile_picture
from modules.users.interfaces import IUserRepository
from modules.users.models import DEFAULT_COUNTRY, Address, SignupRequest, SocialLinks
from modules.users.service import ensure_identity_available
from shared.exceptions import ConfigurationError, ValidationError

from .admin import AdminPrincipalResolver
from .exceptions import (
    InactiveAccountError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    PrincipalUnavailableError,
)
from .interfaces import IAuthService
from .models import (
    AdminAuthPayload,
    AdminPrincipal,
    AdminProfile,
    AuthPayload,
    Principal,
    UserPrincipal,
)
from .passwords import PasswordHasher
from .tokens import TokenService
from .validators import validate_identity_fields

logger = logging.getLogger(__name__)

SIGNUP_REQUIRED_FIELDS = ("email", "password", "first_name", "last_name")
MISSING_CREDENTIALS_MESSAGE = "Please provide email and password"


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Args:
        repository: Credential store
        tokens: Session token issuer/verifier
        hasher: Password hasher
        admin: Resolver for the configured administrator
        media: Media host for signup profile pictures (optional)
    """

    def __init__(
        self,
        repository: IUserRepository,
        tokens: TokenService,
        hasher: PasswordHasher,
        admin: AdminPrincipalResolver,
        media: Optional[IMediaService] = None,
    ):
        self._repository = repository
        self._tokens = tokens
        self._hasher = hasher
        self._admin = admin
        self._media = media

    # -------------------------------------------------------------------------
    # Registration and login
    # -------------------------------------------------------------------------

    async def signup(
        self,
        request: SignupRequest,
        picture: Optional[MediaFile] = None,
    ) -> AuthPayload:
        """
        Register a new user.

        Field checks run first and report every problem at once. The
        uniqueness check is repeated by the store's unique indexes, so of
        two concurrent signups with the same email only one is created.
        """
        fields = request.model_dump(exclude={"address", "social_links"})
        data = validate_identity_fields(fields, required=SIGNUP_REQUIRED_FIELDS)
        ensure_identity_available(
            self._repository,
            email=data["email"],
            phone_number=data.get("phone_number"),
        )

        password = data.pop("password")
        password_hash = await asyncio.to_thread(self._hasher.hash, password)

        address = request.address or Address()
        if not address.country:
            address = address.model_copy(update={"country": DEFAULT_COUNTRY})
        record = {
            **{k: v for k, v in data.items() if v is not None},
            "password_hash": password_hash,
            "address": address,
            "social_links": request.social_links or SocialLinks(),
        }

        upload: Optional[MediaUpload] = None
        if picture is not None:
            if self._media is None:
                raise ConfigurationError(
                    "Media upload not configured", code="MEDIA_NOT_CONFIGURED"
                )
            upload = await upload_profile_picture(self._media, picture)
            record["profile_picture"] = upload.url

        try:
            user = self._repository.create(record)
        except Exception:
            if upload is not None:
                await self._media.delete(upload.public_id)
            raise

        logger.info(f"New user registered: {user.id}")
        token = self._tokens.issue_user_token(user.id)
        return AuthPayload(user=user.to_public(), token=token)

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthPayload:
        """
        Log a stored user in.

        The password is checked before the active flag so that a wrong
        password never reveals whether an account exists or is deactivated.
        """
        if not email or not password:
            raise ValidationError(
                MISSING_CREDENTIALS_MESSAGE, errors=[MISSING_CREDENTIALS_MESSAGE]
            )

        record = self._repository.find_one({"email": email.strip().lower()})
        if record is None:
            raise InvalidCredentialsError()

        matches = await asyncio.to_thread(
            self._hasher.verify, password, record.password_hash
        )
        if not matches:
            logger.info(f"Failed login for user {record.id}")
            raise InvalidCredentialsError()
        if not record.is_active:
            raise InactiveAccountError()

        updated = self._repository.update_by_id(
            record.id, {"last_login_at": datetime.now(timezone.utc).isoformat()}
        )
        user = (updated or record).to_public()

        logger.info(f"User {record.id} logged in")
        return AuthPayload(user=user, token=self._tokens.issue_user_token(record.id))

    async def admin_login(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> AdminAuthPayload:
        if not email or not password:
            raise ValidationError(
                MISSING_CREDENTIALS_MESSAGE, errors=[MISSING_CREDENTIALS_MESSAGE]
            )
        principal = self._admin.authenticate(email.strip(), password)
        logger.info("Admin logged in")
        return AdminAuthPayload(
            token=self._tokens.issue_admin_token(principal),
            user=AdminProfile.from_principal(principal),
        )

    # -------------------------------------------------------------------------
    # Request authentication
    # -------------------------------------------------------------------------

    async def authenticate(self, token: str) -> Principal:
        """
        Verify a token and load its principal.

        Deleted and deactivated users are rejected on every request, not
        only at login, even though their tokens are still validly signed.
        """
        claims = self._tokens.verify(token)

        if claims.is_admin:
            return self._admin.principal_from_claims(claims)

        record = self._repository.find_by_id(claims.sub)
        if record is None or not record.is_active:
            raise PrincipalUnavailableError(claims.sub)

        return UserPrincipal(id=record.id, email=record.email, role=record.role)

    def authorize(self, principal: Principal, allowed_roles: Iterable[str]) -> Principal:
        allowed = {getattr(r, "value", r) for r in allowed_roles}
        role = principal.role.value
        if role not in allowed:
            raise InsufficientPermissionsError(allowed, role)
        return principal

    def issue_token(self, principal: Principal) -> str:
        """Issue a fresh token for an already authenticated principal."""
        if isinstance(principal, AdminPrincipal):
            return self._tokens.issue_admin_token(principal)
        return self._tokens.issue_user_token(principal.id)
