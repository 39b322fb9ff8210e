"""Service requests API: submit, read, edit, the two approval decisions, and feedback."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from portal.api.v1.dependencies import (
    CurrentUserId,
    get_feedback_reader,
    get_feedback_service,
    get_request_reader,
    get_request_workflow,
)
from portal.application.dtos.request import RequestChanges, RequestCreate, RequestFilter
from portal.application.services import FeedbackService
from portal.application.use_cases import RequestWorkflow
from portal.core.limiter import limit_writes
from portal.domain.enums import CombinedRequestStatus
from portal.schemas.feedback import FeedbackBody, FeedbackResponse
from portal.schemas.request import (
    CanApproveResponse,
    DecisionBody,
    RequestCreateBody,
    RequestNoteBody,
    RequestResponse,
    RequestUpdateBody,
)

router = APIRouter()

Workflow = Annotated[RequestWorkflow, Depends(get_request_workflow)]
Reader = Annotated[RequestWorkflow, Depends(get_request_reader)]
Feedback = Annotated[FeedbackService, Depends(get_feedback_service)]
FeedbackReader = Annotated[FeedbackService, Depends(get_feedback_reader)]


@router.get("", response_model=list[RequestResponse])
async def list_requests(
    actor_id: CurrentUserId,
    workflow: Reader,
    status: CombinedRequestStatus | None = None,
    user_id: str | None = None,
    office_id: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """List visible requests. user_id and office_id filters apply to admins only."""
    filters = RequestFilter(
        user_id=user_id, office_id=office_id, status=status, skip=skip, limit=limit
    )
    results = await workflow.list_requests(actor_id, filters)
    return [RequestResponse.from_result(r) for r in results]


@router.post("", response_model=RequestResponse, status_code=201)
@limit_writes
async def create_request(
    request: Request,
    body: RequestCreateBody,
    actor_id: CurrentUserId,
    workflow: Workflow,
):
    created = await workflow.create(
        actor_id,
        RequestCreate(
            service_id=body.service_id, current_address=body.current_address, date=body.date
        ),
    )
    return RequestResponse.from_result(created)


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(request_id: str, actor_id: CurrentUserId, workflow: Reader):
    return RequestResponse.from_result(await workflow.get(actor_id, request_id))


@router.patch("/{request_id}", response_model=RequestResponse)
@limit_writes
async def update_request(
    request: Request,
    request_id: str,
    body: RequestUpdateBody,
    actor_id: CurrentUserId,
    workflow: Workflow,
):
    """Requester edit; 409 once either track has been decided."""
    updated = await workflow.update(
        actor_id,
        request_id,
        RequestChanges(
            service_id=body.service_id, current_address=body.current_address, date=body.date
        ),
    )
    return RequestResponse.from_result(updated)


@router.delete("/{request_id}", status_code=204)
@limit_writes
async def delete_request(
    request: Request, request_id: str, actor_id: CurrentUserId, workflow: Workflow
):
    await workflow.delete(actor_id, request_id)
    return Response(status_code=204)


@router.patch("/{request_id}/note", response_model=RequestResponse)
@limit_writes
async def set_request_note(
    request: Request,
    request_id: str,
    body: RequestNoteBody,
    actor_id: CurrentUserId,
    workflow: Workflow,
):
    """Set the approval note (admin)."""
    return RequestResponse.from_result(
        await workflow.set_note(actor_id, request_id, body.approve_note)
    )


@router.post("/{request_id}/staff-decision", response_model=RequestResponse)
@limit_writes
async def staff_decision(
    request: Request,
    request_id: str,
    body: DecisionBody,
    actor_id: CurrentUserId,
    workflow: Workflow,
):
    """Approve or reject the staff track (assigned staff of the same office)."""
    decided = await workflow.decide_as_staff(actor_id, request_id, body.action, body.note)
    return RequestResponse.from_result(decided)


@router.post("/{request_id}/manager-decision", response_model=RequestResponse)
@limit_writes
async def manager_decision(
    request: Request,
    request_id: str,
    body: DecisionBody,
    actor_id: CurrentUserId,
    workflow: Workflow,
):
    """Approve or reject the manager track (manager of the same office)."""
    decided = await workflow.decide_as_manager(actor_id, request_id, body.action, body.note)
    return RequestResponse.from_result(decided)


@router.get("/{request_id}/can-approve-staff", response_model=CanApproveResponse)
async def can_approve_staff(request_id: str, actor_id: CurrentUserId, workflow: Reader):
    allowed = await workflow.can_approve_as_staff(actor_id, request_id)
    return CanApproveResponse(request_id=request_id, can_approve=allowed)


@router.get("/{request_id}/feedback", response_model=FeedbackResponse | None)
async def get_feedback(request_id: str, actor_id: CurrentUserId, feedback: FeedbackReader):
    """The request's rating, or null if the requester has not rated it."""
    result = await feedback.get_feedback(actor_id, request_id)
    return FeedbackResponse.model_validate(result) if result else None


@router.put("/{request_id}/feedback", response_model=FeedbackResponse)
@limit_writes
async def submit_feedback(
    request: Request,
    request_id: str,
    body: FeedbackBody,
    actor_id: CurrentUserId,
    feedback: Feedback,
):
    """Rate an own request (1-5); submitting again replaces the earlier rating."""
    result = await feedback.submit_feedback(actor_id, request_id, body.rating, body.comment)
    return FeedbackResponse.model_validate(result)
