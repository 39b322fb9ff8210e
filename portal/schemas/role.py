"""Role and permission API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from portal.domain.enums import RoleKind


class RoleCreate(BaseModel):
    """Request body for creating a role. kind is inferred from name when omitted."""

    name: str = Field(..., min_length=1, max_length=64)
    kind: RoleKind | None = None
    office_id: str | None = None
    description: str | None = Field(default=None, max_length=500)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    kind: RoleKind
    office_id: str | None
    description: str | None


class RolePermissionsReplace(BaseModel):
    """Full replacement set for PUT /roles/{id}/permissions."""

    permission_ids: list[str] = Field(default_factory=list, max_length=500)


class RolePermissionsResponse(BaseModel):
    role_id: str
    permissions: list[str]


class PermissionCreate(BaseModel):
    """Request body for creating a permission named 'resource:action'."""

    name: str = Field(..., min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    resource: str
    action: str
    description: str | None
