"""Permissions API: list and create 'resource:action' permissions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portal.api.v1.dependencies import CurrentUserId, get_permission_service
from portal.application.services import PermissionService
from portal.core.limiter import limit_writes
from portal.schemas.role import PermissionCreate, PermissionResponse

router = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    actor_id: CurrentUserId,
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    permissions = await permission_service.list_permissions(actor_id)
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post("", response_model=PermissionResponse, status_code=201)
@limit_writes
async def create_permission(
    request: Request,
    body: PermissionCreate,
    actor_id: CurrentUserId,
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    permission = await permission_service.create_permission(
        actor_id, body.name, body.description
    )
    return PermissionResponse.model_validate(permission)
