"""DTOs for the request workflow."""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.entities.request import ApprovalTracks
from portal.domain.enums import ApprovalStatus, CombinedRequestStatus


@dataclass(frozen=True)
class RequestResult:
    """Request read-model joined with its owning office and requester phone."""

    id: str
    user_id: str
    service_id: str
    office_id: str
    current_address: str
    date: datetime
    status_by_staff: ApprovalStatus
    status_by_manager: ApprovalStatus
    approving_staff_id: str | None = None
    approving_manager_id: str | None = None
    approve_note: str | None = None
    requester_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def tracks(self) -> ApprovalTracks:
        return ApprovalTracks(
            status_by_staff=self.status_by_staff,
            status_by_manager=self.status_by_manager,
            approving_staff_id=self.approving_staff_id,
            approving_manager_id=self.approving_manager_id,
        )

    @property
    def combined_status(self) -> CombinedRequestStatus:
        return self.tracks.combined_status


@dataclass(frozen=True)
class RequestCreate:
    service_id: str
    current_address: str
    date: datetime


@dataclass(frozen=True)
class RequestChanges:
    """Requester-editable fields; None means unchanged."""

    service_id: str | None = None
    current_address: str | None = None
    date: datetime | None = None

    def as_values(self) -> dict[str, object]:
        return {k: v for k, v in vars(self).items() if v is not None}


@dataclass(frozen=True)
class RequestFilter:
    """Listing filter. Scope fields are filled in by the workflow, not the caller."""

    user_id: str | None = None
    office_id: str | None = None
    assigned_staff_id: str | None = None
    status: CombinedRequestStatus | None = None
    skip: int = 0
    limit: int = 50
