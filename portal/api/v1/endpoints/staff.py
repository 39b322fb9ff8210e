"""Staff API: list memberships and add users to an office."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from portal.api.v1.dependencies import CurrentUserId, get_staff_service
from portal.application.services import StaffService
from portal.core.limiter import limit_writes
from portal.schemas.office import StaffCreate, StaffResponse

router = APIRouter()


@router.get("", response_model=list[StaffResponse])
async def list_staff(
    actor_id: CurrentUserId,
    staff_service: Annotated[StaffService, Depends(get_staff_service)],
    office_id: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """Admins may filter by office; managers and staff see their own office."""
    staff = await staff_service.list_staff(actor_id, office_id=office_id, skip=skip, limit=limit)
    return [StaffResponse.model_validate(s) for s in staff]


@router.post("", response_model=StaffResponse, status_code=201)
@limit_writes
async def create_staff(
    request: Request,
    body: StaffCreate,
    actor_id: CurrentUserId,
    staff_service: Annotated[StaffService, Depends(get_staff_service)],
):
    staff = await staff_service.create_staff(
        actor_id, body.user_id, office_id=body.office_id, make_manager=body.make_manager
    )
    return StaffResponse.model_validate(staff)
