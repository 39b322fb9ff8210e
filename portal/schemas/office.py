"""Office, service, and staff API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portal.domain.enums import OfficeStatus


class OfficeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(default=None, max_length=1000)
    phone_number: str | None = Field(default=None, max_length=32)


class OfficeUpdate(BaseModel):
    """Partial update; omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = Field(default=None, max_length=1000)
    phone_number: str | None = Field(default=None, max_length=32)
    status: OfficeStatus | None = None


class OfficeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: str | None
    phone_number: str | None
    status: OfficeStatus


class ServiceCreate(BaseModel):
    office_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    office_id: str
    name: str
    description: str | None


class StaffAssign(BaseModel):
    staff_id: str = Field(..., min_length=1)


class StaffAssignResponse(BaseModel):
    service_id: str
    staff_id: str
    created: bool


class StaffCreate(BaseModel):
    """Admins choose office_id and may add a manager; managers always add staff to their own office."""

    user_id: str = Field(..., min_length=1)
    office_id: str | None = None
    make_manager: bool = False


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    office_id: str
    phone_number: str | None = None
    username: str | None = None
    created_at: datetime | None = None
