"""Domain entities and state rules.

Pure domain models; no ORM or persistence concerns.
"""

from portal.domain.entities.actor import ActorProfile
from portal.domain.entities.appointment import (
    APPOINTMENT_TRANSITIONS,
    allowed_sources,
    can_transition,
    is_active,
    is_locked,
)
from portal.domain.entities.availability import (
    AvailabilityConfig,
    ClosedRange,
    DaySchedule,
    check_config,
)
from portal.domain.entities.request import ApprovalTracks, combine_tracks

__all__ = [
    "APPOINTMENT_TRANSITIONS",
    "ActorProfile",
    "ApprovalTracks",
    "AvailabilityConfig",
    "ClosedRange",
    "DaySchedule",
    "allowed_sources",
    "can_transition",
    "check_config",
    "combine_tracks",
    "is_active",
    "is_locked",
]
