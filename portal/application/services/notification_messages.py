"""Notification topics and SMS text for request and appointment events."""

from __future__ import annotations

from portal.application.dtos.appointment import AppointmentResult
from portal.application.dtos.request import RequestResult
from portal.domain.enums import (
    AppointmentStatus,
    ApprovalStatus,
    ApprovalTrack,
    CombinedRequestStatus,
)

TOPIC_REQUEST_APPROVED = "request.fully_approved"
TOPIC_REQUEST_AWAITING_MANAGER = "request.awaiting_manager"
TOPIC_REQUEST_AWAITING_STAFF = "request.awaiting_staff"
TOPIC_REQUEST_REJECTED = "request.rejected"
TOPIC_APPOINTMENT_PREFIX = "appointment."


def request_decision_message(
    request: RequestResult, track: ApprovalTrack
) -> tuple[str, str] | None:
    """Return (topic, text) after a decision on track, or None if nothing to say."""
    combined = request.combined_status
    ref = request.id
    if combined == CombinedRequestStatus.FULLY_APPROVED:
        return (
            TOPIC_REQUEST_APPROVED,
            f"Your request {ref} has been fully approved. You can now book an appointment.",
        )
    decided = request.status_by_staff if track == ApprovalTrack.STAFF else request.status_by_manager
    if decided == ApprovalStatus.REJECTED:
        note = f" Note: {request.approve_note}" if request.approve_note else ""
        return (
            TOPIC_REQUEST_REJECTED,
            f"Your request {ref} was rejected by the office {track.value}.{note}",
        )
    if decided == ApprovalStatus.APPROVED and track == ApprovalTrack.STAFF:
        return (
            TOPIC_REQUEST_AWAITING_MANAGER,
            f"Your request {ref} was approved by staff and is awaiting manager approval.",
        )
    if decided == ApprovalStatus.APPROVED and track == ApprovalTrack.MANAGER:
        return (
            TOPIC_REQUEST_AWAITING_STAFF,
            f"Your request {ref} was approved by the manager and is awaiting staff approval.",
        )
    return None


_APPOINTMENT_TEXT: dict[AppointmentStatus, str] = {
    AppointmentStatus.APPROVED: "Your appointment on {when} has been approved.",
    AppointmentStatus.REJECTED: "Your appointment on {when} was rejected. Please book another time.",
    AppointmentStatus.COMPLETED: "Your appointment on {when} is complete. Thank you.",
    AppointmentStatus.CANCELLED: "Your appointment on {when} has been cancelled.",
}


def appointment_status_message(appointment: AppointmentResult) -> tuple[str, str] | None:
    template = _APPOINTMENT_TEXT.get(appointment.status)
    if template is None:
        return None
    when = appointment.date.strftime("%Y-%m-%d")
    if appointment.time:
        when = f"{when} {appointment.time}"
    return (
        f"{TOPIC_APPOINTMENT_PREFIX}{appointment.status.value}",
        template.format(when=when),
    )
