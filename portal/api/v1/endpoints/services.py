"""Services API: public catalogue, management, and staff assignment."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from portal.api.v1.dependencies import (
    CurrentUserId,
    get_office_service,
    get_public_office_service,
)
from portal.application.services import OfficeService
from portal.core.limiter import limit_writes
from portal.schemas.office import (
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    StaffAssign,
    StaffAssignResponse,
    StaffResponse,
)

router = APIRouter()


@router.get("", response_model=list[ServiceResponse])
async def list_services(
    office_service: Annotated[OfficeService, Depends(get_public_office_service)],
    office_id: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """Services of active offices (public)."""
    services = await office_service.list_public_services(office_id, skip=skip, limit=limit)
    return [ServiceResponse.model_validate(s) for s in services]


@router.post("", response_model=ServiceResponse, status_code=201)
@limit_writes
async def create_service(
    request: Request,
    body: ServiceCreate,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_office_service)],
):
    service = await office_service.create_service(
        actor_id, body.office_id, body.name, body.description
    )
    return ServiceResponse.model_validate(service)


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    office_service: Annotated[OfficeService, Depends(get_public_office_service)],
):
    return ServiceResponse.model_validate(await office_service.get_service(service_id))


@router.patch("/{service_id}", response_model=ServiceResponse)
@limit_writes
async def update_service(
    request: Request,
    service_id: str,
    body: ServiceUpdate,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_office_service)],
):
    service = await office_service.update_service(
        actor_id, service_id, body.model_dump(exclude_none=True)
    )
    return ServiceResponse.model_validate(service)


@router.get("/{service_id}/staff", response_model=list[StaffResponse])
async def list_service_staff(
    service_id: str,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_public_office_service)],
):
    staff = await office_service.list_service_staff(actor_id, service_id)
    return [StaffResponse.model_validate(s) for s in staff]


@router.post("/{service_id}/staff", response_model=StaffAssignResponse)
@limit_writes
async def assign_service_staff(
    request: Request,
    service_id: str,
    body: StaffAssign,
    response: Response,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_office_service)],
):
    """Assign a staff member; 201 when new, 200 when already assigned."""
    created = await office_service.assign_staff(actor_id, service_id, body.staff_id)
    response.status_code = 201 if created else 200
    return StaffAssignResponse(service_id=service_id, staff_id=body.staff_id, created=created)


@router.delete("/{service_id}/staff/{staff_id}", status_code=204)
@limit_writes
async def unassign_service_staff(
    request: Request,
    service_id: str,
    staff_id: str,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_office_service)],
):
    await office_service.unassign_staff(actor_id, service_id, staff_id)
    return Response(status_code=204)
