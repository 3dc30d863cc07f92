"""
User profile endpoints.

Provides endpoints for editing, viewing, deactivating and deleting accounts.
"""

from fastapi import APIRouter, Depends, Request

from modules.auth.models import Principal, UserPrincipal
from modules.users.models import ProfileUpdate, UserPayload, UserWithPhonePayload
from modules.users.service import UserService
from shared.models import success_response

from ..dependencies import get_user_service
from ..forms import parse_model, read_payload
from ..middleware.auth import RequireAuth, RequireUser

router = APIRouter()


@router.put("/profile")
async def update_profile(
    request: Request,
    user: UserPrincipal = RequireUser,
    users: UserService = Depends(get_user_service),
):
    """
    Partially update the current user's profile.

    Only keys present in the body change. Accepts JSON or multipart form
    data with an optional ``profilePicture``.
    """
    data, picture = await read_payload(request)
    update = parse_model(ProfileUpdate, data)
    updated, phone = await users.edit_profile(user.id, update, picture=picture)
    payload = UserWithPhonePayload(user=updated, phone_details=phone)
    return success_response(
        payload.model_dump(mode="json", by_alias=True),
        message="Profile updated successfully",
    )


@router.get("/profile/{user_id}")
async def get_profile(
    user_id: str,
    principal: Principal = RequireAuth,
    users: UserService = Depends(get_user_service),
):
    """Get another user's public profile. Deactivated users are hidden."""
    profile = await users.get_public_profile(user_id)
    return success_response(UserPayload(user=profile).model_dump(mode="json", by_alias=True))


@router.delete("/profile")
async def delete_account(
    user: UserPrincipal = RequireUser,
    users: UserService = Depends(get_user_service),
):
    await users.delete_account(user.id)
    return success_response(message="Account deleted successfully")


@router.put("/deactivate")
async def deactivate_account(
    user: UserPrincipal = RequireUser,
    users: UserService = Depends(get_user_service),
):
    await users.deactivate_account(user.id)
    return success_response(message="Account deactivated successfully")
