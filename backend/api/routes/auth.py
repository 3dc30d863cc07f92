"""
Authentication endpoints.

Signup, login, logout and the signed-in user's own identity details.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from modules.auth.interfaces import IAuthService
from modules.auth.models import Principal, UserPrincipal
from modules.media.exceptions import InvalidUploadError
from modules.users.models import (
    LoginRequest,
    PhonePayload,
    PhoneUpdateRequest,
    SignupRequest,
    UserPayload,
)
from modules.users.service import UserService
from shared.models import success_response

from ..dependencies import get_auth_service, get_user_service
from ..forms import parse_model, read_payload
from ..middleware.auth import RequireAuth, RequireUser

router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: Request,
    auth: IAuthService = Depends(get_auth_service),
):
    """
    Register a new user.

    Accepts JSON or multipart form data with an optional ``profilePicture``.
    """
    data, picture = await read_payload(request)
    payload = await auth.signup(parse_model(SignupRequest, data), picture=picture)
    return success_response(
        payload.model_dump(mode="json", by_alias=True),
        message="User registered successfully",
    )


@router.post("/login")
async def login(
    body: Optional[LoginRequest] = None,
    auth: IAuthService = Depends(get_auth_service),
):
    body = body or LoginRequest()
    payload = await auth.login(body.email, body.password)
    return success_response(
        payload.model_dump(mode="json", by_alias=True),
        message="Login successful",
    )


@router.get("/me")
async def me(
    principal: Principal = RequireAuth,
    users: UserService = Depends(get_user_service),
):
    """Get the current principal's profile and phone breakdown."""
    user, phone = await users.get_me(principal)
    return success_response(
        {
            "user": user.model_dump(mode="json", by_alias=True),
            "phoneDetails": phone.model_dump(mode="json", by_alias=True),
        }
    )


@router.post("/logout")
async def logout(principal: Principal = RequireAuth):
    """
    Log out.

    Tokens are not stored server-side, so the client just discards its token.
    """
    return success_response(message="Logged out successfully")


@router.put("/phone")
async def update_phone(
    body: Optional[PhoneUpdateRequest] = None,
    user: UserPrincipal = RequireUser,
    users: UserService = Depends(get_user_service),
):
    body = body or PhoneUpdateRequest()
    phone = await users.update_phone(user.id, body.phone_number)
    return success_response(
        PhonePayload(phone_details=phone).model_dump(mode="json", by_alias=True),
        message="Phone number updated successfully",
    )


@router.put("/profile-picture")
async def update_profile_picture(
    request: Request,
    user: UserPrincipal = RequireUser,
    users: UserService = Depends(get_user_service),
):
    """Replace the profile picture. Expects multipart field ``profilePicture``."""
    _, picture = await read_payload(request)
    if picture is None:
        raise InvalidUploadError("Please upload a profile picture")
    updated = await users.update_profile_picture(user.id, picture)
    return success_response(
        UserPayload(user=updated).model_dump(mode="json", by_alias=True),
        message="Profile picture updated successfully",
    )
