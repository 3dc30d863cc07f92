"""
User management service.

Profile editing for the signed-in user and user administration for admins.
Partial updates only touch the keys present in the request; address and
social links are merged key by key.
"""

import logging
from typing import Any, Iterable, Optional

from modules.auth.models import AdminPrincipal, AdminProfile, Principal
from modules.auth.validators import CLEARABLE_FIELDS, validate_identity_fields
from modules.media.interfaces import IMediaService
from modules.media.models import MediaFile
from modules.media.service import upload_profile_picture
from shared.exceptions import ConfigurationError, ValidationError

from .exceptions import (
    DuplicateUserError,
    SelfModificationError,
    UserNotFoundError,
    UserProfileUnavailableError,
)
from .interfaces import IUserRepository
from .models import (
    AdminUserUpdate,
    BulkOperation,
    PhoneDetails,
    ProfileUpdate,
    PublicUser,
    UserRecord,
    UserStatusFilter,
    merge_nested,
)

logger = logging.getLogger(__name__)

_NESTED_FIELDS = {"address", "social_links"}


def ensure_identity_available(
    repository: IUserRepository,
    email: Optional[str] = None,
    phone_number: Optional[str] = None,
    exclude_id: Optional[str] = None,
) -> None:
    """
    Check that an email and/or phone number is not used by another user.

    This is the friendly early check; the store's unique indexes still
    decide the outcome if two requests race.

    Raises:
        DuplicateUserError: If either value is taken
    """
    if email and repository.find_one({"email": email}, exclude_id=exclude_id):
        if exclude_id:
            raise DuplicateUserError("email", "Email already registered by another user")
        raise DuplicateUserError("email", "User with this email already exists")

    if phone_number and repository.find_one(
        {"phone_number": phone_number}, exclude_id=exclude_id
    ):
        if exclude_id:
            raise DuplicateUserError(
                "phone_number", "Phone number already registered by another user"
            )
        raise DuplicateUserError("phone_number", "Phone number already registered")


class UserService:
    """
    Profile and administration operations over the credential store.

    Args:
        repository: Credential store
        media: Media host for profile pictures (optional; uploads fail
            with a configuration error without it)
    """

    def __init__(
        self,
        repository: IUserRepository,
        media: Optional[IMediaService] = None,
    ):
        self._repository = repository
        self._media = media

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_user(self, user_id: str) -> UserRecord:
        record = self._repository.find_by_id(user_id)
        if record is None:
            raise UserNotFoundError(user_id)
        return record

    def _build_patch(
        self,
        record: UserRecord,
        update: ProfileUpdate,
    ) -> dict[str, Any]:
        """Validate the provided keys of ``update`` and check uniqueness."""
        provided = update.model_dump(exclude_unset=True)
        flat = {
            k: v
            for k, v in provided.items()
            if k not in _NESTED_FIELDS and (v is not None or k in CLEARABLE_FIELDS)
        }
        patch = validate_identity_fields(flat)

        email = patch.get("email")
        if email is not None and email == record.email:
            email = None
        phone = patch.get("phone_number")
        if phone is not None and phone == record.phone_number:
            phone = None
        ensure_identity_available(
            self._repository, email=email, phone_number=phone, exclude_id=record.id
        )

        if "address" in provided:
            patch["address"] = merge_nested(record.address, update.address)
        if "social_links" in provided:
            patch["social_links"] = merge_nested(record.social_links, update.social_links)
        return patch

    async def _upload_picture(self, file: MediaFile):
        if self._media is None:
            raise ConfigurationError(
                "Media upload not configured", code="MEDIA_NOT_CONFIGURED"
            )
        return await upload_profile_picture(self._media, file)

    async def _apply(
        self,
        user_id: str,
        patch: dict[str, Any],
        picture: Optional[MediaFile] = None,
    ) -> UserRecord:
        """
        Write ``patch``, uploading ``picture`` first if given.

        If the write fails after a successful upload the uploaded asset
        is removed again.
        """
        upload = None
        if picture is not None:
            upload = await self._upload_picture(picture)
            patch = {**patch, "profile_picture": upload.url}

        try:
            updated = self._repository.update_by_id(user_id, patch)
        except Exception:
            if upload is not None:
                await self._media.delete(upload.public_id)
            raise

        if updated is None:
            if upload is not None:
                await self._media.delete(upload.public_id)
            raise UserNotFoundError(user_id)
        return updated

    # -------------------------------------------------------------------------
    # Self-service
    # -------------------------------------------------------------------------

    async def get_me(self, principal: Principal) -> tuple[Any, PhoneDetails]:
        """Current principal's profile and phone breakdown."""
        if isinstance(principal, AdminPrincipal):
            return AdminProfile.from_principal(principal), PhoneDetails()
        record = self._require_user(principal.id)
        return record.to_public(), PhoneDetails.from_number(record.phone_number)

    async def update_phone(self, user_id: str, raw: Optional[str]) -> PhoneDetails:
        if not raw:
            raise ValidationError(
                "Phone number is required", errors=["Phone number is required"]
            )
        record = self._require_user(user_id)
        patch = self._build_patch(record, ProfileUpdate(phone_number=raw))
        updated = await self._apply(user_id, patch)
        logger.info(f"User {user_id} updated phone number")
        return PhoneDetails.from_number(updated.phone_number)

    async def update_profile_picture(self, user_id: str, picture: MediaFile) -> PublicUser:
        self._require_user(user_id)
        updated = await self._apply(user_id, {}, picture=picture)
        logger.info(f"User {user_id} updated profile picture")
        return updated.to_public()

    async def edit_profile(
        self,
        user_id: str,
        update: ProfileUpdate,
        picture: Optional[MediaFile] = None,
    ) -> tuple[PublicUser, PhoneDetails]:
        """Apply a partial profile update, optionally with a new picture."""
        record = self._require_user(user_id)
        patch = self._build_patch(record, update)
        updated = await self._apply(user_id, patch, picture=picture)
        logger.info(f"User {user_id} updated profile fields: {sorted(patch)}")
        return updated.to_public(), PhoneDetails.from_number(updated.phone_number)

    async def get_public_profile(self, user_id: str) -> PublicUser:
        record = self._require_user(user_id)
        if not record.is_active:
            raise UserProfileUnavailableError(user_id)
        return record.to_public()

    async def delete_account(self, user_id: str) -> None:
        if not self._repository.delete_by_id(user_id):
            raise UserNotFoundError(user_id)
        logger.info(f"User {user_id} deleted their account")

    async def deactivate_account(self, user_id: str) -> None:
        if self._repository.update_by_id(user_id, {"is_active": False}) is None:
            raise UserNotFoundError(user_id)
        logger.info(f"User {user_id} deactivated their account")

    # -------------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------------

    async def list_users(
        self,
        search: Optional[str] = None,
        status: UserStatusFilter = UserStatusFilter.ALL,
    ) -> list[PublicUser]:
        is_active = None
        if status != UserStatusFilter.ALL:
            is_active = status == UserStatusFilter.ACTIVE
        records = self._repository.list_users(search=search, is_active=is_active)
        return [r.to_public() for r in records]

    async def get_user(self, user_id: str) -> PublicUser:
        return self._require_user(user_id).to_public()

    async def update_user(self, user_id: str, update: AdminUserUpdate) -> PublicUser:
        record = self._require_user(user_id)
        patch = self._build_patch(record, update)
        updated = await self._apply(user_id, patch)
        logger.info(f"Admin updated user {user_id}: {sorted(patch)}")
        return updated.to_public()

    async def delete_user(self, user_id: str, acting: Principal) -> None:
        self._require_user(user_id)
        if user_id == acting.id:
            raise SelfModificationError("Cannot delete your own account")
        self._repository.delete_by_id(user_id)
        logger.info(f"Admin {acting.id} deleted user {user_id}")

    async def set_user_status(
        self,
        user_id: str,
        is_active: bool,
        acting: Principal,
    ) -> PublicUser:
        self._require_user(user_id)
        if user_id == acting.id and not is_active:
            raise SelfModificationError("Cannot deactivate your own account")
        updated = await self._apply(user_id, {"is_active": is_active})
        logger.info(
            f"Admin {acting.id} {'activated' if is_active else 'deactivated'} user {user_id}"
        )
        return updated.to_public()

    async def bulk_operation(
        self,
        operation: BulkOperation,
        user_ids: Iterable[str],
        acting: Principal,
    ) -> int:
        """Activate, deactivate or delete many users. Returns the affected count."""
        ids = list(dict.fromkeys(user_ids))
        if acting.id in ids:
            raise SelfModificationError(
                "Cannot perform bulk operations on your own account"
            )

        if operation == BulkOperation.DELETE:
            affected = self._repository.delete_many(ids)
        else:
            affected = self._repository.update_many(
                ids, {"is_active": operation == BulkOperation.ACTIVATE}
            )
        logger.info(f"Admin {acting.id} bulk {operation.value}: {affected} users")
        return affected
