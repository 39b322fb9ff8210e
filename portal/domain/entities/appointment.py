"""Appointment state machine.

Allowed status changes, keyed by target status. Completed is terminal;
approved and completed appointments are immutable apart from the listed
transitions.
"""

from portal.domain.enums import AppointmentStatus

APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.APPROVED: frozenset({AppointmentStatus.PENDING}),
    AppointmentStatus.REJECTED: frozenset({AppointmentStatus.PENDING}),
    AppointmentStatus.COMPLETED: frozenset({AppointmentStatus.APPROVED}),
    AppointmentStatus.CANCELLED: frozenset(
        {AppointmentStatus.PENDING, AppointmentStatus.APPROVED}
    ),
}


def allowed_sources(target: AppointmentStatus) -> frozenset[AppointmentStatus]:
    """Return the statuses an appointment may move to target from (empty if none)."""
    return APPOINTMENT_TRANSITIONS.get(target, frozenset())


def can_transition(current: AppointmentStatus | str, target: AppointmentStatus) -> bool:
    return AppointmentStatus(current) in allowed_sources(target)


def is_active(status: AppointmentStatus | str) -> bool:
    """Active appointments block creating another one for the same request."""
    return AppointmentStatus(status) not in AppointmentStatus.inactive()


def is_locked(status: AppointmentStatus | str) -> bool:
    return AppointmentStatus(status) in AppointmentStatus.locked()
