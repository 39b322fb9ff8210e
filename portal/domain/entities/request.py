"""Service request domain entity: the two approval tracks and their projection.

Each track is decided independently; the combined status is derived and
never stored.
"""

from dataclasses import dataclass

from portal.domain.enums import ApprovalStatus, CombinedRequestStatus


def combine_tracks(
    status_by_staff: ApprovalStatus | str,
    status_by_manager: ApprovalStatus | str,
) -> CombinedRequestStatus:
    """Project both approval tracks to a single status.

    Rejected on either track wins over approved on the other.
    """
    staff = ApprovalStatus(status_by_staff)
    manager = ApprovalStatus(status_by_manager)
    if ApprovalStatus.REJECTED in (staff, manager):
        return CombinedRequestStatus.REJECTED
    if staff == ApprovalStatus.APPROVED and manager == ApprovalStatus.APPROVED:
        return CombinedRequestStatus.FULLY_APPROVED
    return CombinedRequestStatus.PENDING


@dataclass(frozen=True)
class ApprovalTracks:
    """Snapshot of a request's staff and manager tracks."""

    status_by_staff: ApprovalStatus
    status_by_manager: ApprovalStatus
    approving_staff_id: str | None = None
    approving_manager_id: str | None = None

    @property
    def combined_status(self) -> CombinedRequestStatus:
        return combine_tracks(self.status_by_staff, self.status_by_manager)

    @property
    def is_fully_approved(self) -> bool:
        return self.combined_status == CombinedRequestStatus.FULLY_APPROVED

    @property
    def is_editable_by_requester(self) -> bool:
        """Requester may edit or delete only before either track moves."""
        return (
            self.status_by_staff == ApprovalStatus.PENDING
            and self.status_by_manager == ApprovalStatus.PENDING
        )
