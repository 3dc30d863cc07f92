"""
Administration endpoints.

Admin login plus user management. Everything except login requires a
principal with the ``admin`` role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.auth.interfaces import IAuthService
from modules.auth.models import Principal
from modules.users.models import (
    AdminUserUpdate,
    BulkOperationPayload,
    BulkOperationRequest,
    LoginRequest,
    StatusUpdateRequest,
    UserListPayload,
    UserPayload,
    UserStatusFilter,
)
from modules.users.service import UserService
from shared.models import success_response

from ..dependencies import get_auth_service, get_user_service
from ..middleware.auth import RequireAdmin

router = APIRouter()


@router.post("/login")
async def admin_login(
    body: Optional[LoginRequest] = None,
    auth: IAuthService = Depends(get_auth_service),
):
    """Log in as the configured administrator."""
    body = body or LoginRequest()
    payload = await auth.admin_login(body.email, body.password)
    return success_response(
        payload.model_dump(mode="json", by_alias=True),
        message="Admin login successful",
    )


@router.get("/users")
async def list_users(
    search: Optional[str] = Query(default=None, description="Match name or email"),
    status: UserStatusFilter = Query(default=UserStatusFilter.ALL),
    admin: Principal = RequireAdmin,
    users: UserService = Depends(get_user_service),
):
    """
    List users, newest first.

    ``search`` matches first name, last name or email case-insensitively.
    """
    found = await users.list_users(search=search, status=status)
    payload = UserListPayload(users=found, total=len(found))
    return success_response(payload.model_dump(mode="json", by_alias=True))


@router.post("/users/bulk")
async def bulk_operation(
    body: BulkOperationRequest,
    admin: Principal = RequireAdmin,
    users: UserService = Depends(get_user_service),
):
    affected = await users.bulk_operation(body.operation, body.user_ids, admin)
    return success_response(
        BulkOperationPayload(affected_count=affected).model_dump(mode="json", by_alias=True),
        message=f"Bulk {body.operation.value} completed for {affected} users",
    )


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    admin: Principal = RequireAdmin,
    users: UserService = Depends(get_user_service),
):
    user = await users.get_user(user_id)
    return success_response(UserPayload(user=user).model_dump(mode="json", by_alias=True))


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    body: AdminUserUpdate,
    admin: Principal = RequireAdmin,
    users: UserService = Depends(get_user_service),
):
    user = await users.update_user(user_id, body)
    return success_response(
        UserPayload(user=user).model_dump(mode="json", by_alias=True),
        message="User updated successfully",
    )


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: Principal = RequireAdmin,
    users: UserService = Depends(get_user_service),
):
    await users.delete_user(user_id, admin)
    return success_response(message="User deleted successfully")


@router.put("/users/{user_id}/toggle-status")
async def toggle_status(
    user_id: str,
    body: StatusUpdateRequest,
    admin: Principal = RequireAdmin,
    users: UserService = Depends(get_user_service),
):
    user = await users.set_user_status(user_id, body.is_active, admin)
    state = "activated" if user.is_active else "deactivated"
    return success_response(
        UserPayload(user=user).model_dump(mode="json", by_alias=True),
        message=f"User {state} successfully",
    )
