"""DTOs for the appointment lifecycle."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from portal.domain.enums import AppointmentStatus


@dataclass(frozen=True)
class AppointmentResult:
    """Appointment read-model joined with the owning office and requester phone."""

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
    requester_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class AppointmentCreate:
    request_id: str
    date: datetime
    time: str | None = None
    notes: str | None = None
    staff_id: str | None = None


# Marks a field the caller did not send.
UNSET: Any = object()


@dataclass(frozen=True)
class AppointmentChanges:
    """Editable fields. Omitted fields are unchanged; None clears time or notes."""

    date: datetime = UNSET
    time: str | None = UNSET
    notes: str | None = UNSET

    def as_values(self) -> dict[str, object]:
        return {k: v for k, v in vars(self).items() if v is not UNSET}


@dataclass(frozen=True)
class AppointmentFilter:
    user_id: str | None = None
    office_id: str | None = None
    request_id: str | None = None
    status: AppointmentStatus | None = None
    skip: int = 0
    limit: int = 50
