"""Offices API.

Anyone may list active offices. With a token, admins may list every status;
inactive offices stay visible to their own staff and managers.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from portal.api.v1.dependencies import (
    CurrentUserId,
    OptionalUserId,
    get_availability_reader,
    get_availability_service,
    get_office_service,
    get_public_office_service,
)
from portal.application.services import AvailabilityService, OfficeService
from portal.core.limiter import limit_writes
from portal.domain.enums import OfficeStatus
from portal.schemas.availability import (
    AvailabilityResponse,
    AvailabilityUpdateBody,
    SlotsResponse,
)
from portal.schemas.office import OfficeCreate, OfficeResponse, OfficeUpdate

router = APIRouter()


@router.get("", response_model=list[OfficeResponse])
async def list_offices(
    actor_id: OptionalUserId,
    office_service: Annotated[OfficeService, Depends(get_public_office_service)],
    status: OfficeStatus | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    if actor_id is None:
        offices = await office_service.list_public_offices(skip=skip, limit=limit)
    else:
        offices = await office_service.list_offices(actor_id, status, skip=skip, limit=limit)
    return [OfficeResponse.model_validate(o) for o in offices]


@router.post("", response_model=OfficeResponse, status_code=201)
@limit_writes
async def create_office(
    request: Request,
    body: OfficeCreate,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_office_service)],
):
    office = await office_service.create_office(
        actor_id, body.name, address=body.address, phone_number=body.phone_number
    )
    return OfficeResponse.model_validate(office)


@router.get("/{office_id}", response_model=OfficeResponse)
async def get_office(
    office_id: str,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_public_office_service)],
):
    office = await office_service.get_office(actor_id, office_id)
    return OfficeResponse.model_validate(office)


@router.patch("/{office_id}", response_model=OfficeResponse)
@limit_writes
async def update_office(
    request: Request,
    office_id: str,
    body: OfficeUpdate,
    actor_id: CurrentUserId,
    office_service: Annotated[OfficeService, Depends(get_office_service)],
):
    """Update name, address, phone or status (admin or the office's manager)."""
    office = await office_service.update_office(
        actor_id, office_id, body.model_dump(exclude_none=True)
    )
    return OfficeResponse.model_validate(office)


@router.get("/{office_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    office_id: str,
    actor_id: CurrentUserId,
    availability: Annotated[AvailabilityService, Depends(get_availability_reader)],
):
    """Opening hours and closures; the default schedule if none was configured."""
    config = await availability.get_availability(actor_id, office_id)
    return AvailabilityResponse.from_config(office_id, config)


@router.put("/{office_id}/availability", response_model=AvailabilityResponse)
@limit_writes
async def update_availability(
    request: Request,
    office_id: str,
    body: AvailabilityUpdateBody,
    actor_id: CurrentUserId,
    availability: Annotated[AvailabilityService, Depends(get_availability_service)],
):
    """Change opening hours, slot length or closures (admin or the office's manager)."""
    config = await availability.update_availability(actor_id, office_id, body.to_changes())
    return AvailabilityResponse.from_config(office_id, config)


@router.get("/{office_id}/availability/slots", response_model=SlotsResponse)
async def get_slots(
    office_id: str,
    actor_id: CurrentUserId,
    availability: Annotated[AvailabilityService, Depends(get_availability_reader)],
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
):
    """Free and booked slot start times for one day."""
    slots = await availability.get_slots(actor_id, office_id, day)
    return SlotsResponse.from_result(slots)
