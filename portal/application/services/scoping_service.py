"""Office/staff scoping index.

Answers "which office does this actor act for" and "does this actor reach
this resource". Admins bypass office checks; managers and staff are held to
their first staff membership's office; everyone else only reaches what they
own.
"""

from __future__ import annotations

import logging

from portal.application.dtos.appointment import AppointmentResult
from portal.application.dtos.request import RequestResult
from portal.application.interfaces.repositories import IScopeRepository
from portal.domain.entities.actor import ActorProfile
from portal.domain.enums import DenialReason
from portal.domain.exceptions import AuthorizationException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class ScopingService:
    """Resolve office ownership and enforce office, ownership and assignment rules."""

    def __init__(self, scope_repo: IScopeRepository) -> None:
        self.scope_repo = scope_repo

    async def actor_profile(self, user_id: str) -> ActorProfile:
        """Return the actor's role kind and membership; Forbidden if the user is gone."""
        profile = await self.scope_repo.get_actor_profile(user_id)
        if profile is None:
            raise AuthorizationException(
                message="Forbidden: not found", reason=DenialReason.NOT_FOUND.value
            )
        return profile

    async def find_profile(self, user_id: str) -> ActorProfile | None:
        """Profile of any user (e.g. the target of a role change), or None."""
        return await self.scope_repo.get_actor_profile(user_id)

    async def office_of_actor(self, user_id: str) -> str | None:
        profile = await self.find_profile(user_id)
        return profile.office_id if profile else None

    async def office_of_service(self, service_id: str) -> str:
        office_id = await self.scope_repo.get_service_office_id(service_id)
        if office_id is None:
            raise ResourceNotFoundException("service", service_id)
        return office_id

    async def office_of_request(self, request_id: str) -> str:
        office_id = await self.scope_repo.get_request_office_id(request_id)
        if office_id is None:
            raise ResourceNotFoundException("request", request_id)
        return office_id

    async def office_of_appointment(self, appointment_id: str) -> str:
        office_id = await self.scope_repo.get_appointment_office_id(appointment_id)
        if office_id is None:
            raise ResourceNotFoundException("appointment", appointment_id)
        return office_id

    @staticmethod
    def in_office(actor: ActorProfile, office_id: str | None) -> bool:
        """True for admins, and for office-tier actors of the same office."""
        if actor.is_admin:
            return True
        return (
            actor.is_office_tier
            and actor.office_id is not None
            and actor.office_id == office_id
        )

    def require_office_scope(self, actor: ActorProfile, office_id: str | None) -> None:
        """Raise Forbidden unless in_office() holds."""
        if self.in_office(actor, office_id):
            return
        logger.info(
            "Office scope denied for user %s (office %s, target %s)",
            actor.user_id,
            actor.office_id,
            office_id,
        )
        raise AuthorizationException(
            message="Forbidden: resource belongs to another office",
            reason=DenialReason.OUT_OF_SCOPE.value,
            scope="office",
        )

    async def is_assigned(self, actor: ActorProfile, service_id: str) -> bool:
        if actor.staff_id is None:
            return False
        return await self.scope_repo.is_staff_assigned(service_id, actor.staff_id)

    async def require_service_assignment(self, actor: ActorProfile, service_id: str) -> None:
        """Non-admin actors must hold a staff assignment for the service."""
        if actor.is_admin or await self.is_assigned(actor, service_id):
            return
        logger.info(
            "Service assignment denied for user %s on service %s", actor.user_id, service_id
        )
        raise AuthorizationException(
            message="Forbidden: not assigned to this service",
            reason=DenialReason.NOT_ASSIGNED.value,
            scope="service_assignment",
        )

    @staticmethod
    def require_owner(actor: ActorProfile, owner_id: str) -> None:
        if actor.user_id == owner_id:
            return
        raise AuthorizationException(
            message="Forbidden: only the requester may do this",
            reason=DenialReason.NOT_OWNER.value,
            scope="owner",
        )

    async def can_read_request(self, actor: ActorProfile, request: RequestResult) -> bool:
        """Admin: any; manager: same office; staff: assigned service; others: own."""
        if actor.is_admin or request.user_id == actor.user_id:
            return True
        if actor.is_manager:
            return actor.office_id is not None and actor.office_id == request.office_id
        if actor.is_staff:
            return await self.is_assigned(actor, request.service_id)
        return False

    def can_access_appointment(self, actor: ActorProfile, appointment: AppointmentResult) -> bool:
        """Owner, same-office staff or manager, or admin."""
        return appointment.user_id == actor.user_id or self.in_office(
            actor, appointment.office_id
        )

    def require_appointment_access(
        self, actor: ActorProfile, appointment: AppointmentResult
    ) -> None:
        if self.can_access_appointment(actor, appointment):
            return
        raise AuthorizationException(
            message="Forbidden: appointment is outside your scope",
            reason=DenialReason.OUT_OF_SCOPE.value,
            scope="appointment",
        )
