"""Users API: current user, permission checks for UI gating, role and status changes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portal.api.v1.dependencies import (
    CurrentUserId,
    Guard,
    Scoping,
    get_role_service,
    get_user_read_service,
    get_user_service,
)
from portal.application.services import RoleService, UserService
from portal.core.limiter import limit_writes
from portal.domain.enums import PermissionCheckMode
from portal.schemas.user import (
    CurrentUserResponse,
    PermissionCheckRequest,
    PermissionCheckResponse,
    RoleAssignRequest,
    UserResponse,
    UserStatusUpdate,
)

router = APIRouter()


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    actor_id: CurrentUserId,
    user_service: Annotated[UserService, Depends(get_user_read_service)],
    guard: Guard,
    scoping: Scoping,
):
    """Current user with role kind, office membership and effective permissions."""
    user = await user_service.get_user(actor_id)
    profile = await scoping.actor_profile(actor_id)
    permissions = await guard.get_permissions(actor_id)
    return CurrentUserResponse(
        id=user.id,
        phone_number=user.phone_number,
        username=user.username,
        email=user.email,
        is_active=user.is_active,
        role_id=user.role_id,
        role_kind=profile.role_kind,
        office_id=profile.office_id,
        staff_id=profile.staff_id,
        permissions=sorted(permissions),
    )


@router.post("/me/permissions/check", response_model=PermissionCheckResponse)
async def check_my_permissions(
    body: PermissionCheckRequest,
    actor_id: CurrentUserId,
    guard: Guard,
):
    """Return the guard's decision for the listed permissions (any/all)."""
    if body.mode == PermissionCheckMode.ANY:
        decision = await guard.check_any(actor_id, body.permissions)
    else:
        decision = await guard.check_all(actor_id, body.permissions)
    return PermissionCheckResponse(
        allowed=decision.allowed,
        reason=decision.reason_code.value if decision.reason_code else None,
        message=decision.reason,
        permission=decision.permission,
    )


@router.put("/{user_id}/role", response_model=UserResponse)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: RoleAssignRequest,
    actor_id: CurrentUserId,
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Give user_id the role, subject to the role-assignment rules."""
    user = await role_service.assign_role(actor_id, user_id, body.role_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/status", response_model=UserResponse)
@limit_writes
async def set_user_status(
    request: Request,
    user_id: str,
    body: UserStatusUpdate,
    actor_id: CurrentUserId,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Activate or deactivate an account (admin)."""
    user = await user_service.set_active(actor_id, user_id, body.is_active)
    return UserResponse.model_validate(user)
