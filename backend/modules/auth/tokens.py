"""
Session token service.

Tokens are HS256 JWTs signed with the single process-wide secret from
AuthConfig. They are self-contained and never stored, so expiry is the only
way a token stops working.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import AuthConfig
from .exceptions import AuthNotConfiguredError, InvalidTokenError
from .models import ADMIN_PRINCIPAL_ID, AdminPrincipal, TokenClaims

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenService:
    """Issues and verifies signed, expiring session tokens."""

    def __init__(self, config: AuthConfig):
        if not config.jwt_secret:
            raise AuthNotConfiguredError()
        self._secret = config.jwt_secret
        self._algorithm = config.jwt_algorithm
        self.user_ttl = timedelta(days=config.user_token_ttl_days)
        self.admin_ttl = timedelta(hours=config.admin_token_ttl_hours)

    def issue(
        self,
        principal_id: str,
        ttl: timedelta,
        claims: Optional[dict[str, Any]] = None,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """
        Sign a token for ``principal_id`` that expires ``ttl`` after issuance.

        Args:
            principal_id: Stored user id, or the admin sentinel
            ttl: Lifetime of the token
            claims: Extra claims (admin email and role)
            issued_at: Issuance time, defaults to now

        Returns:
            Encoded JWT string
        """
        now = issued_at or datetime.now(timezone.utc)
        payload: dict[str, Any] = dict(claims or {})
        payload.update(
            {
                "sub": str(principal_id),
                "iat": int(now.timestamp()),
                "exp": int((now + ttl).timestamp()),
            }
        )
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def issue_user_token(self, user_id: str) -> str:
        return self.issue(user_id, self.user_ttl)

    def issue_admin_token(self, principal: AdminPrincipal) -> str:
        return self.issue(
            ADMIN_PRINCIPAL_ID,
            self.admin_ttl,
            claims={"email": principal.email, "role": principal.role.value},
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.

        Raises:
            InvalidTokenError: For any malformed, tampered or expired token
        """
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
            return TokenClaims(**payload)
        except (jwt.InvalidTokenError, PydanticValidationError):
            raise InvalidTokenError()
