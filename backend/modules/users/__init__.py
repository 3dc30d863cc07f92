"""
Users module.

Stores user records and implements profile editing and user administration.

Public API:
- IUserRepository: Interface for the credential store
- UserRecord, PublicUser: Stored and client-facing user models
- Request models: ProfileUpdate, AdminUserUpdate, BulkOperationRequest
- Users exceptions: UserNotFoundError, DuplicateUserError, etc.
"""

from .interfaces import IUserRepository
from .models import (
    Address,
    AdminUserUpdate,
    BulkOperation,
    BulkOperationRequest,
    Gender,
    PhoneDetails,
    ProfileUpdate,
    PublicUser,
    Role,
    SignupRequest,
    SocialLinks,
    UserRecord,
    UserStatusFilter,
)
from .exceptions import (
    DuplicateUserError,
    SelfModificationError,
    UserNotFoundError,
    UserProfileUnavailableError,
)

__all__ = [
    # Interface
    "IUserRepository",
    # Models
    "Address",
    "AdminUserUpdate",
    "BulkOperation",
    "BulkOperationRequest",
    "Gender",
    "PhoneDetails",
    "ProfileUpdate",
    "PublicUser",
    "Role",
    "SignupRequest",
    "SocialLinks",
    "UserRecord",
    "UserStatusFilter",
    # Exceptions
    "DuplicateUserError",
    "SelfModificationError",
    "UserNotFoundError",
    "UserProfileUnavailableError",
]
