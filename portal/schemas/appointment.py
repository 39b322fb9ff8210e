"""Appointment API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.domain.enums import AppointmentStatus, DecisionAction
from portal.shared.utils.datetime import ensure_utc

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentCreateBody(BaseModel):
    """Book an appointment; staff_id must belong to the request's office."""

    request_id: str = Field(..., min_length=1)
    date: datetime
    time: str | None = Field(default=None, pattern=_TIME_PATTERN, description="HH:MM")
    notes: str | None = Field(default=None, max_length=2000)
    staff_id: str | None = None

    @field_validator("date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class AppointmentUpdateBody(BaseModel):
    """Partial update. Only sent fields change; null clears time or notes."""

    date: datetime | None = None
    time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        if v is None:
            raise ValueError("date cannot be cleared")
        return ensure_utc(v)


class AppointmentDecisionBody(BaseModel):
    action: DecisionAction


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    user_id: str
    office_id: str
    service_id: str
    staff_id: str | None
    date: datetime
    time: str | None
    notes: str | None
    status: AppointmentStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
