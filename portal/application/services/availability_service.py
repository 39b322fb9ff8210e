"""Office availability: opening hours, closures, and the slots left to book."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any

from portal.application.dtos.availability import DaySlots
from portal.application.interfaces.repositories import (
    IAppointmentRepository,
    IAvailabilityRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.office_service import OfficeService
from portal.application.services.scoping_service import ScopingService
from portal.domain.entities.availability import AvailabilityConfig, check_config
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Anyone who may view an office sees its hours and free slots.

    Only admins and the office's own manager change them. An office that was
    never configured uses the default weekly schedule.
    """

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        offices: OfficeService,
        availability_repo: IAvailabilityRepository,
        appointment_repo: IAppointmentRepository,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.offices = offices
        self.availability_repo = availability_repo
        self.appointment_repo = appointment_repo

    async def _config(self, office_id: str) -> AvailabilityConfig:
        stored = await self.availability_repo.get_for_office(office_id)
        return stored or AvailabilityConfig()

    async def get_availability(self, actor_id: str, office_id: str) -> AvailabilityConfig:
        await self.offices.get_office(actor_id, office_id)
        return await self._config(office_id)

    @traced("office.availability.update")
    async def update_availability(
        self, actor_id: str, office_id: str, changes: dict[str, Any]
    ) -> AvailabilityConfig:
        """Apply changes over the current configuration.

        Weekdays missing from ``weekly`` keep their hours; every other field
        given replaces the stored value.
        """
        await self.guard.require(actor_id, "office:configure")
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, office_id)
        await self.offices.get_office(actor_id, office_id)
        current = await self._config(office_id)
        if "weekly" in changes:
            changes = {**changes, "weekly": {**current.weekly, **changes["weekly"]}}
        updated = replace(current, **changes)
        check_config(updated)
        saved = await self.availability_repo.save(office_id, updated)
        logger.info("Availability of office %s updated by %s", office_id, actor_id)
        return saved

    async def get_slots(self, actor_id: str, office_id: str, day: date) -> DaySlots:
        await self.offices.get_office(actor_id, office_id)
        config = await self._config(office_id)
        booked = sorted(set(await self.appointment_repo.booked_times(office_id, day)))
        return DaySlots(
            office_id=office_id,
            date=day,
            available_slots=config.slots_for(day, booked),
            booked_slots=booked,
        )
