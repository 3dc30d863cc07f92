"""
Users module data models.

UserRecord mirrors a row of the ``users`` table and is the only model that
carries the password hash. Everything returned to clients goes through
PublicUser, which is serialized with camelCase keys.
"""

import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


# International number: "+", a nonzero leading digit, then 1-14 more digits
PHONE_NUMBER_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
COUNTRY_CODE_PATTERN = re.compile(r"^\+(\d{1,4})")
LOCAL_NUMBER_PATTERN = re.compile(r"^\+\d{1,4}(.+)")

DEFAULT_COUNTRY = "India"


class Role(str, Enum):
    """Access role stored on a user record."""

    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


class Gender(str, Enum):
    """Self-reported gender. Defaults to undisclosed."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNDISCLOSED = "prefer-not-to-say"


class CamelModel(BaseModel):
    """Base for models exchanged with clients (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Address(CamelModel):
    """Postal address. Every part is optional."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None


class SocialLinks(CamelModel):
    """Links to the user's social media profiles."""

    facebook: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class UserRecord(BaseModel):
    """
    A stored user, including the credential.

    Never return this model from an endpoint; use to_public().
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    password_hash: str = Field(..., repr=False)
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Gender = Gender.UNDISCLOSED
    address: Address = Field(default_factory=Address)
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    is_active: bool = True
    is_verified: bool = False
    role: Role = Role.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def to_public(self) -> "PublicUser":
        """Drop the credential and expose the client-facing view."""
        return PublicUser.model_validate(
            self.model_dump(exclude={"password_hash"})
        )


class PublicUser(CamelModel):
    """User profile as returned by the API. Has no password field."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Gender = Gender.UNDISCLOSED
    address: Address = Field(default_factory=Address)
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    is_active: bool = True
    is_verified: bool = False
    role: Role = Role.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @computed_field
    @property
    def age(self) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        today = datetime.now(timezone.utc).date()
        born = self.date_of_birth
        years = today.year - born.year
        if (today.month, today.day) < (born.month, born.day):
            years -= 1
        return years


class PhoneDetails(CamelModel):
    """Breakdown of a stored phone number for display."""

    full_number: Optional[str] = None
    country_code: Optional[str] = None
    number_without_country_code: Optional[str] = None
    is_valid: bool = False
    formatted_number: Optional[str] = None

    @classmethod
    def from_number(cls, number: Optional[str]) -> "PhoneDetails":
        if not number:
            return cls()
        country = COUNTRY_CODE_PATTERN.match(number)
        local = LOCAL_NUMBER_PATTERN.match(number)
        return cls(
            full_number=number,
            country_code=country.group(1) if country else None,
            number_without_country_code=local.group(1) if local else number,
            is_valid=bool(PHONE_NUMBER_PATTERN.match(number)),
            formatted_number=number,
        )


# -----------------------------------------------------------------------------
# Request models
#
# Identity fields are typed loosely on purpose: the identity validator
# inspects them all and reports every problem in one response.
# -----------------------------------------------------------------------------


class SignupRequest(CamelModel):
    """Registration input."""

    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[Address] = None
    bio: Optional[str] = None
    social_links: Optional[SocialLinks] = None


class LoginRequest(CamelModel):
    """Email/password login input (users and admin)."""

    email: Optional[str] = None
    password: Optional[str] = None


class PhoneUpdateRequest(CamelModel):
    phone_number: Optional[str] = None


class ProfileUpdate(CamelModel):
    """
    Self-service partial profile update.

    Only keys present in the request body are applied.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[Address] = None
    bio: Optional[str] = None
    social_links: Optional[SocialLinks] = None


class AdminUserUpdate(ProfileUpdate):
    """Admin partial update; may also change email, status and role."""

    email: Optional[str] = None
    is_active: Optional[bool] = None
    role: Optional[Role] = None


class StatusUpdateRequest(CamelModel):
    is_active: bool


class BulkOperation(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    DELETE = "delete"


class BulkOperationRequest(CamelModel):
    operation: BulkOperation
    user_ids: list[str] = Field(..., min_length=1)


class UserStatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


# -----------------------------------------------------------------------------
# Response payloads
# -----------------------------------------------------------------------------


class UserPayload(CamelModel):
    user: PublicUser


class UserWithPhonePayload(CamelModel):
    user: PublicUser
    phone_details: PhoneDetails


class PhonePayload(CamelModel):
    phone_details: PhoneDetails


class UserListPayload(CamelModel):
    users: list[PublicUser]
    total: int


class BulkOperationPayload(CamelModel):
    affected_count: int


def merge_nested(current: BaseModel, update: Optional[BaseModel]) -> dict[str, Any]:
    """
    Merge the explicitly provided keys of ``update`` into ``current``.

    Used for address and social links, where a partial update of one key
    must not wipe the others.
    """
    merged = current.model_dump()
    if update is not None:
        merged.update(update.model_dump(exclude_unset=True))
    return merged
