"""DTOs for offices, services, and staff memberships."""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.enums import OfficeStatus


@dataclass(frozen=True)
class OfficeResult:
    id: str
    name: str
    address: str | None
    phone_number: str | None
    status: OfficeStatus


@dataclass(frozen=True)
class ServiceResult:
    id: str
    office_id: str
    name: str
    description: str | None


@dataclass(frozen=True)
class StaffResult:
    """Staff membership with the member's public identity."""

    id: str
    user_id: str
    office_id: str
    phone_number: str | None = None
    username: str | None = None
    created_at: datetime | None = None
