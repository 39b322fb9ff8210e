"""Office and service catalogue, including service-staff assignments."""

from __future__ import annotations

import logging

from portal.application.dtos.office import OfficeResult, ServiceResult, StaffResult
from portal.application.interfaces.repositories import (
    IOfficeRepository,
    IServiceRepository,
    IStaffRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.scoping_service import ScopingService
from portal.domain.enums import OfficeStatus
from portal.domain.exceptions import ResourceNotFoundException, ValidationException
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class OfficeService:
    """Admins run offices; admins and the office's manager run its services."""

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        office_repo: IOfficeRepository,
        service_repo: IServiceRepository,
        staff_repo: IStaffRepository,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.office_repo = office_repo
        self.service_repo = service_repo
        self.staff_repo = staff_repo

    async def list_public_offices(self, skip: int = 0, limit: int = 100) -> list[OfficeResult]:
        """Active offices only; inactive ones are hidden from discovery."""
        return await self.office_repo.list_offices(OfficeStatus.ACTIVE, skip=skip, limit=limit)

    async def list_offices(
        self,
        actor_id: str,
        status: OfficeStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[OfficeResult]:
        """Admins may list any status; everyone else sees active offices."""
        await self.guard.require(actor_id, "office:read")
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            status = OfficeStatus.ACTIVE
        return await self.office_repo.list_offices(status, skip=skip, limit=limit)

    async def get_office(self, actor_id: str, office_id: str) -> OfficeResult:
        """Inactive offices are visible only to admins and their own staff."""
        await self.guard.require(actor_id, "office:read")
        office = await self.office_repo.get_by_id(office_id)
        if office is None:
            raise ResourceNotFoundException("office", office_id)
        if office.status != OfficeStatus.ACTIVE:
            actor = await self.scoping.actor_profile(actor_id)
            if not self.scoping.in_office(actor, office_id):
                raise ResourceNotFoundException("office", office_id)
        return office

    @traced("office.create")
    async def create_office(
        self,
        actor_id: str,
        name: str,
        address: str | None = None,
        phone_number: str | None = None,
    ) -> OfficeResult:
        await self.guard.require(actor_id, "office:create")
        office = await self.office_repo.create_office(name, address, phone_number)
        logger.info("Office %s created by %s", office.id, actor_id)
        return office

    @traced("office.update")
    async def update_office(
        self, actor_id: str, office_id: str, values: dict[str, object]
    ) -> OfficeResult:
        await self.guard.require(actor_id, "office:update")
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, office_id)
        updated = await self.office_repo.update_office(office_id, values)
        if updated is None:
            raise ResourceNotFoundException("office", office_id)
        return updated

    async def list_public_services(
        self, office_id: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[ServiceResult]:
        return await self.service_repo.list_services(
            office_id=office_id, active_offices_only=True, skip=skip, limit=limit
        )

    async def get_service(self, service_id: str) -> ServiceResult:
        service = await self.service_repo.get_by_id(service_id)
        if service is None:
            raise ResourceNotFoundException("service", service_id)
        return service

    @traced("service.create")
    async def create_service(
        self, actor_id: str, office_id: str, name: str, description: str | None = None
    ) -> ServiceResult:
        await self.guard.require(actor_id, "service:create")
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, office_id)
        if await self.office_repo.get_by_id(office_id) is None:
            raise ResourceNotFoundException("office", office_id)
        service = await self.service_repo.create_service(office_id, name, description)
        logger.info("Service %s created in office %s by %s", service.id, office_id, actor_id)
        return service

    @traced("service.update")
    async def update_service(
        self, actor_id: str, service_id: str, values: dict[str, object]
    ) -> ServiceResult:
        await self.guard.require(actor_id, "service:update")
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, await self.scoping.office_of_service(service_id))
        updated = await self.service_repo.update_service(service_id, values)
        if updated is None:
            raise ResourceNotFoundException("service", service_id)
        return updated

    async def list_service_staff(self, actor_id: str, service_id: str) -> list[StaffResult]:
        await self.guard.require(actor_id, "staff:read")
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, await self.scoping.office_of_service(service_id))
        return await self.service_repo.list_assigned_staff(service_id)

    @traced("service.assign_staff")
    async def assign_staff(self, actor_id: str, service_id: str, staff_id: str) -> bool:
        """Assign a staff member of the service's office; repeats are no-ops.

        Returns:
            True if a new assignment was created.
        """
        await self.guard.require(actor_id, "service:assign-staff")
        actor = await self.scoping.actor_profile(actor_id)
        office_id = await self.scoping.office_of_service(service_id)
        self.scoping.require_office_scope(actor, office_id)
        staff = await self.staff_repo.get_by_id(staff_id)
        if staff is None:
            raise ResourceNotFoundException("staff", staff_id)
        if staff.office_id != office_id:
            raise ValidationException(
                "Staff member belongs to another office", field="staff_id"
            )
        created = await self.service_repo.assign_staff(service_id, staff_id)
        if created:
            logger.info("Staff %s assigned to service %s by %s", staff_id, service_id, actor_id)
        return created

    @traced("service.unassign_staff")
    async def unassign_staff(self, actor_id: str, service_id: str, staff_id: str) -> None:
        await self.guard.require(actor_id, "service:assign-staff")
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, await self.scoping.office_of_service(service_id))
        if not await self.service_repo.unassign_staff(service_id, staff_id):
            raise ResourceNotFoundException("service_staff_assignment", f"{service_id}/{staff_id}")
        logger.info("Staff %s unassigned from service %s by %s", staff_id, service_id, actor_id)
