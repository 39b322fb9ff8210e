"""Appointments API: booking, edits, decisions, completion and cancellation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from portal.api.v1.dependencies import (
    CurrentUserId,
    get_appointment_lifecycle,
    get_appointment_reader,
)
from portal.application.dtos.appointment import (
    AppointmentChanges,
    AppointmentCreate,
    AppointmentFilter,
)
from portal.application.use_cases import AppointmentLifecycle
from portal.core.limiter import limit_writes
from portal.domain.enums import AppointmentStatus
from portal.schemas.appointment import (
    AppointmentCreateBody,
    AppointmentDecisionBody,
    AppointmentResponse,
    AppointmentUpdateBody,
)

router = APIRouter()

Lifecycle = Annotated[AppointmentLifecycle, Depends(get_appointment_lifecycle)]
Reader = Annotated[AppointmentLifecycle, Depends(get_appointment_reader)]


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    actor_id: CurrentUserId,
    lifecycle: Reader,
    request_id: str | None = None,
    status: AppointmentStatus | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    filters = AppointmentFilter(request_id=request_id, status=status, skip=skip, limit=limit)
    results = await lifecycle.list_appointments(actor_id, filters)
    return [AppointmentResponse.model_validate(a) for a in results]


@router.post("", response_model=AppointmentResponse, status_code=201)
@limit_writes
async def create_appointment(
    request: Request,
    body: AppointmentCreateBody,
    actor_id: CurrentUserId,
    lifecycle: Lifecycle,
):
    """Book an appointment for a fully approved request."""
    created = await lifecycle.create(
        actor_id,
        AppointmentCreate(
            request_id=body.request_id,
            date=body.date,
            time=body.time,
            notes=body.notes,
            staff_id=body.staff_id,
        ),
    )
    return AppointmentResponse.model_validate(created)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: str, actor_id: CurrentUserId, lifecycle: Reader):
    return AppointmentResponse.model_validate(await lifecycle.get(actor_id, appointment_id))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
@limit_writes
async def update_appointment(
    request: Request,
    appointment_id: str,
    body: AppointmentUpdateBody,
    actor_id: CurrentUserId,
    lifecycle: Lifecycle,
):
    """Edit date, time or notes; 409 once approved or completed."""
    updated = await lifecycle.update(
        actor_id,
        appointment_id,
        AppointmentChanges(**body.model_dump(exclude_unset=True)),
    )
    return AppointmentResponse.model_validate(updated)


@router.delete("/{appointment_id}", status_code=204)
@limit_writes
async def delete_appointment(
    request: Request, appointment_id: str, actor_id: CurrentUserId, lifecycle: Lifecycle
):
    await lifecycle.delete(actor_id, appointment_id)
    return Response(status_code=204)


@router.post("/{appointment_id}/decision", response_model=AppointmentResponse)
@limit_writes
async def decide_appointment(
    request: Request,
    appointment_id: str,
    body: AppointmentDecisionBody,
    actor_id: CurrentUserId,
    lifecycle: Lifecycle,
):
    decided = await lifecycle.decide(actor_id, appointment_id, body.action)
    return AppointmentResponse.model_validate(decided)


@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
@limit_writes
async def complete_appointment(
    request: Request, appointment_id: str, actor_id: CurrentUserId, lifecycle: Lifecycle
):
    return AppointmentResponse.model_validate(await lifecycle.complete(actor_id, appointment_id))


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
@limit_writes
async def cancel_appointment(
    request: Request, appointment_id: str, actor_id: CurrentUserId, lifecycle: Lifecycle
):
    return AppointmentResponse.model_validate(await lifecycle.cancel(actor_id, appointment_id))
