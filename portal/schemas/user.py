"""User API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from portal.domain.enums import PermissionCheckMode, RoleKind


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    phone_number: str
    username: str | None
    email: str | None
    is_active: bool
    role_id: str | None


class CurrentUserResponse(UserResponse):
    """GET /users/me: the user, their role and office, and effective permissions."""

    role_kind: RoleKind | None = None
    office_id: str | None = None
    staff_id: str | None = None
    permissions: list[str] = Field(default_factory=list)


class PermissionCheckRequest(BaseModel):
    permissions: list[str] = Field(..., min_length=1, max_length=50)
    mode: PermissionCheckMode = PermissionCheckMode.ALL


class PermissionCheckResponse(BaseModel):
    allowed: bool
    reason: str | None = None
    message: str | None = None
    permission: str | None = None


class RoleAssignRequest(BaseModel):
    role_id: str = Field(..., min_length=1)


class UserStatusUpdate(BaseModel):
    is_active: bool
