"""Service request API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from portal.application.dtos.request import RequestResult
from portal.domain.enums import ApprovalStatus, CombinedRequestStatus, DecisionAction
from portal.shared.utils.datetime import ensure_utc


class RequestCreateBody(BaseModel):
    service_id: str = Field(..., min_length=1)
    current_address: str = Field(..., min_length=1, max_length=1000)
    date: datetime

    @field_validator("date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class RequestUpdateBody(BaseModel):
    """Requester edit while both tracks are pending; omitted fields are unchanged."""

    service_id: str | None = Field(default=None, min_length=1)
    current_address: str | None = Field(default=None, min_length=1, max_length=1000)
    date: datetime | None = None

    @field_validator("date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class RequestNoteBody(BaseModel):
    approve_note: str | None = Field(default=None, max_length=2000)


class DecisionBody(BaseModel):
    action: DecisionAction
    note: str | None = Field(default=None, max_length=2000)


class RequestResponse(BaseModel):
    id: str
    user_id: str
    service_id: str
    office_id: str
    current_address: str
    date: datetime
    status_by_staff: ApprovalStatus
    status_by_manager: ApprovalStatus
    approving_staff_id: str | None
    approving_manager_id: str | None
    approve_note: str | None
    combined_status: CombinedRequestStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_result(cls, r: RequestResult) -> "RequestResponse":
        return cls(
            id=r.id,
            user_id=r.user_id,
            service_id=r.service_id,
            office_id=r.office_id,
            current_address=r.current_address,
            date=r.date,
            status_by_staff=r.status_by_staff,
            status_by_manager=r.status_by_manager,
            approving_staff_id=r.approving_staff_id,
            approving_manager_id=r.approving_manager_id,
            approve_note=r.approve_note,
            combined_status=r.combined_status,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class CanApproveResponse(BaseModel):
    request_id: str
    can_approve: bool
