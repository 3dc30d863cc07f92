"""
Users module exceptions.
"""

from shared.exceptions import DuplicateError, NotFoundError, ValidationError


class UserNotFoundError(NotFoundError):
    """Raised when a referenced user does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class UserProfileUnavailableError(NotFoundError):
    """Raised when a public profile is requested for a deactivated user."""

    def __init__(self, user_id: str):
        super().__init__(
            "User profile not available",
            code="USER_PROFILE_UNAVAILABLE",
            details={"user_id": user_id},
        )


class DuplicateUserError(DuplicateError):
    """Raised when an email or phone number is already taken."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message,
            errors=[message],
            code="DUPLICATE_" + field.upper(),
            details={"field": field},
        )
        self.field = field


class SelfModificationError(ValidationError):
    """Raised when an admin targets their own account with a destructive action."""

    def __init__(self, message: str):
        super().__init__(message, code="SELF_MODIFICATION")
