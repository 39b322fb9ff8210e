"""Roles API: list, create, and replace a role's permission set."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from portal.api.v1.dependencies import CurrentUserId, get_role_service
from portal.application.services import RoleService
from portal.core.limiter import limit_writes
from portal.schemas.role import (
    RoleCreate,
    RolePermissionsReplace,
    RolePermissionsResponse,
    RoleResponse,
)

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    actor_id: CurrentUserId,
    role_service: Annotated[RoleService, Depends(get_role_service)],
    office_id: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    roles = await role_service.list_roles(actor_id, office_id=office_id, skip=skip, limit=limit)
    return [RoleResponse.model_validate(r) for r in roles]


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreate,
    actor_id: CurrentUserId,
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Create a role. Only admins may create manager or admin roles."""
    role = await role_service.create_role(
        actor_id,
        name=body.name,
        kind=body.kind,
        office_id=body.office_id,
        description=body.description,
    )
    return RoleResponse.model_validate(role)


@router.get("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def get_role_permissions(
    role_id: str,
    actor_id: CurrentUserId,
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    names = await role_service.get_role_permissions(actor_id, role_id)
    return RolePermissionsResponse(role_id=role_id, permissions=sorted(names))


@router.put("/{role_id}/permissions", response_model=RolePermissionsResponse)
@limit_writes
async def replace_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsReplace,
    actor_id: CurrentUserId,
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Replace the role's permissions with exactly permission_ids (admin)."""
    names = await role_service.replace_permissions(actor_id, role_id, body.permission_ids)
    return RolePermissionsResponse(role_id=role_id, permissions=names)
