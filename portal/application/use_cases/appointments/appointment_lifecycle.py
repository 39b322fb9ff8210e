"""Appointment lifecycle: booking from a fully approved request, edits, and status changes.

Booking locks the parent request row, so two bookings for the same request
serialize; the partial unique index on active appointments backs this up.
Status changes are conditional UPDATEs on the allowed source statuses.
"""

from __future__ import annotations

import logging

from portal.application.dtos.appointment import (
    AppointmentChanges,
    AppointmentCreate,
    AppointmentFilter,
    AppointmentResult,
)
from portal.application.interfaces.repositories import (
    IAppointmentRepository,
    INotificationOutbox,
    IRequestRepository,
    IStaffRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.notification_messages import appointment_status_message
from portal.application.services.scoping_service import ScopingService
from portal.domain.entities.actor import ActorProfile
from portal.domain.entities.appointment import allowed_sources, is_locked
from portal.domain.enums import AppointmentStatus, DecisionAction, DenialReason
from portal.domain.exceptions import (
    ActiveAppointmentExistsException,
    AppointmentLockedException,
    AuthorizationException,
    InvalidTransitionException,
    RequestNotFullyApprovedException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.domain.permissions import WorkflowPermission
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class AppointmentLifecycle:
    """Appointment use cases for requesters and in-scope office staff."""

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        appointment_repo: IAppointmentRepository,
        request_repo: IRequestRepository,
        staff_repo: IStaffRepository,
        outbox: INotificationOutbox,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.appointment_repo = appointment_repo
        self.request_repo = request_repo
        self.staff_repo = staff_repo
        self.outbox = outbox

    async def _load(self, appointment_id: str) -> AppointmentResult:
        appointment = await self.appointment_repo.get_by_id(appointment_id)
        if appointment is None:
            raise ResourceNotFoundException("appointment", appointment_id)
        return appointment

    async def _load_accessible(self, actor_id: str, appointment_id: str) -> AppointmentResult:
        appointment = await self._load(appointment_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_appointment_access(actor, appointment)
        return appointment

    @traced("appointment.create")
    async def create(self, actor_id: str, data: AppointmentCreate) -> AppointmentResult:
        """Book an appointment for a fully approved request.

        The appointment belongs to the requester even when staff book it.

        Raises:
            RequestNotFullyApprovedException: Either track is not approved.
            ActiveAppointmentExistsException: The request already has an active appointment.
            ValidationException: staff_id is not a member of the request's office.
        """
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_CREATE)
        request = await self.request_repo.get_by_id(data.request_id)
        if request is None:
            raise ResourceNotFoundException("request", data.request_id)
        actor = await self.scoping.actor_profile(actor_id)
        if request.user_id != actor.user_id and not self.scoping.in_office(
            actor, request.office_id
        ):
            raise AuthorizationException(
                message="Forbidden: request is outside your scope",
                reason=(
                    DenialReason.OUT_OF_SCOPE.value
                    if actor.is_office_tier
                    else DenialReason.NOT_OWNER.value
                ),
                scope="request",
            )

        locked = await self.request_repo.get_for_update(data.request_id)
        if locked is None:
            raise ResourceNotFoundException("request", data.request_id)
        if not locked.tracks.is_fully_approved:
            raise RequestNotFullyApprovedException(data.request_id)
        if await self.appointment_repo.has_active_for_request(data.request_id):
            raise ActiveAppointmentExistsException(data.request_id)

        staff_id = await self._resolve_staff(actor, locked.office_id, data.staff_id)
        created = await self.appointment_repo.create_appointment(locked.user_id, staff_id, data)
        logger.info(
            "Appointment %s booked for request %s by %s", created.id, data.request_id, actor_id
        )
        return created

    async def _resolve_staff(
        self, actor: ActorProfile, office_id: str, staff_id: str | None
    ) -> str | None:
        if staff_id is None:
            if actor.is_office_tier and actor.office_id == office_id:
                return actor.staff_id
            return None
        staff = await self.staff_repo.get_by_id(staff_id)
        if staff is None or staff.office_id != office_id:
            raise ValidationException("Invalid staff assignment", field="staff_id")
        return staff.id

    async def get(self, actor_id: str, appointment_id: str) -> AppointmentResult:
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_READ)
        return await self._load_accessible(actor_id, appointment_id)

    async def list_appointments(
        self, actor_id: str, filters: AppointmentFilter
    ) -> list[AppointmentResult]:
        """Owner: own; staff and managers: their office; admin: everything."""
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_READ)
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            base = {
                "request_id": filters.request_id,
                "status": filters.status,
                "skip": filters.skip,
                "limit": filters.limit,
            }
            if actor.is_office_tier and actor.office_id is not None:
                filters = AppointmentFilter(office_id=actor.office_id, **base)
            else:
                filters = AppointmentFilter(user_id=actor.user_id, **base)
        return await self.appointment_repo.list_appointments(filters)

    @traced("appointment.update")
    async def update(
        self, actor_id: str, appointment_id: str, changes: AppointmentChanges
    ) -> AppointmentResult:
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_UPDATE)
        appointment = await self._load_accessible(actor_id, appointment_id)
        values = changes.as_values()
        if not values:
            if is_locked(appointment.status):
                raise AppointmentLockedException(appointment_id, "update")
            return appointment
        updated = await self.appointment_repo.update_if_unlocked(appointment_id, values)
        if updated is None:
            raise AppointmentLockedException(appointment_id, "update")
        return updated

    @traced("appointment.delete")
    async def delete(self, actor_id: str, appointment_id: str) -> None:
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_DELETE)
        await self._load_accessible(actor_id, appointment_id)
        if not await self.appointment_repo.delete_if_unlocked(appointment_id):
            raise AppointmentLockedException(appointment_id, "delete")
        logger.info("Appointment %s deleted by %s", appointment_id, actor_id)

    @traced("appointment.decide")
    async def decide(
        self, actor_id: str, appointment_id: str, action: DecisionAction
    ) -> AppointmentResult:
        """Approve or reject a pending appointment; the decider becomes its staff."""
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_APPROVE)
        appointment = await self._load(appointment_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, appointment.office_id)
        if actor.is_staff:
            await self.scoping.require_service_assignment(actor, appointment.service_id)
        target = (
            AppointmentStatus.APPROVED
            if action == DecisionAction.APPROVE
            else AppointmentStatus.REJECTED
        )
        return await self._transition(actor_id, appointment_id, target, actor.staff_id)

    @traced("appointment.complete")
    async def complete(self, actor_id: str, appointment_id: str) -> AppointmentResult:
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_UPDATE)
        appointment = await self._load(appointment_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, appointment.office_id)
        return await self._transition(actor_id, appointment_id, AppointmentStatus.COMPLETED)

    @traced("appointment.cancel")
    async def cancel(self, actor_id: str, appointment_id: str) -> AppointmentResult:
        """Owner or in-scope staff may cancel until the appointment is completed."""
        await self.guard.require(actor_id, WorkflowPermission.APPOINTMENT_UPDATE)
        await self._load_accessible(actor_id, appointment_id)
        return await self._transition(actor_id, appointment_id, AppointmentStatus.CANCELLED)

    async def _transition(
        self,
        actor_id: str,
        appointment_id: str,
        target: AppointmentStatus,
        staff_id: str | None = None,
    ) -> AppointmentResult:
        sources = allowed_sources(target)
        moved = await self.appointment_repo.transition(appointment_id, target, sources, staff_id)
        if moved is None:
            raise InvalidTransitionException(
                appointment_id, target.value, sorted(s.value for s in sources)
            )
        logger.info("Appointment %s -> %s by %s", appointment_id, target.value, actor_id)
        await self._notify(moved)
        return moved

    async def _notify(self, appointment: AppointmentResult) -> None:
        message = appointment_status_message(appointment)
        if message is None or not appointment.requester_phone:
            return
        topic, text = message
        await self.outbox.enqueue(appointment.requester_phone, text, topic)
