"""
Admin principal resolver.

The administrator is not a stored user. Its identity comes from two
configured secrets, compared as plain strings (in constant time), and it
only ever exists as an AdminPrincipal on a request.
"""

import hmac
import logging

from shared.config import AuthConfig
from .exceptions import AdminNotConfiguredError, InvalidCredentialsError
from .models import AdminPrincipal, TokenClaims

logger = logging.getLogger(__name__)

ADMIN_CREDENTIALS_MESSAGE = "Invalid admin credentials"


def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class AdminPrincipalResolver:
    """Authenticates the configured admin and materializes its principal."""

    def __init__(self, config: AuthConfig):
        self._config = config

    @property
    def is_configured(self) -> bool:
        return self._config.admin_configured

    def authenticate(self, email: str, password: str) -> AdminPrincipal:
        """
        Check admin credentials against configuration.

        Raises:
            AdminNotConfiguredError: If the admin email/password pair is unset
            InvalidCredentialsError: If either value does not match. The
                message is the same whichever one was wrong.
        """
        if not self.is_configured:
            logger.error("Admin login attempted but admin credentials are not configured")
            raise AdminNotConfiguredError()

        # Evaluate both so the outcome does not depend on which field failed
        email_ok = _matches(email or "", self._config.admin_email)
        password_ok = _matches(password or "", self._config.admin_password)
        if not (email_ok and password_ok):
            logger.warning("Failed admin login attempt")
            raise InvalidCredentialsError(ADMIN_CREDENTIALS_MESSAGE)

        return self.principal()

    def principal(self) -> AdminPrincipal:
        return AdminPrincipal(email=self._config.admin_email)

    def principal_from_claims(self, claims: TokenClaims) -> AdminPrincipal:
        """Rebuild the admin principal from a verified admin token."""
        return AdminPrincipal(email=claims.email or self._config.admin_email)
