"""Office, service, and staff dependencies (composition root)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.services import (
    AuthorizationService,
    AvailabilityService,
    OfficeService,
    ScopingService,
    StaffService,
)
from portal.infrastructure.persistence.repositories import (
    AppointmentRepository,
    OfficeAvailabilityRepository,
    OfficeRepository,
    RolePermissionRepository,
    RoleRepository,
    ScopeRepository,
    ServiceRepository,
    StaffRepository,
    UserRepository,
)
from portal.infrastructure.services import PermissionResolver

from .rbac import Guard, ReadSession, Scoping, WriteSession


async def get_office_service(db: WriteSession, guard: Guard, scoping: Scoping) -> OfficeService:
    return OfficeService(
        guard=guard,
        scoping=scoping,
        office_repo=OfficeRepository(db),
        service_repo=ServiceRepository(db),
        staff_repo=StaffRepository(db),
    )


async def get_public_office_service(db: ReadSession) -> OfficeService:
    """Office service on the read session, for anonymous discovery endpoints."""
    return OfficeService(
        guard=AuthorizationService(PermissionResolver(db)),
        scoping=ScopingService(ScopeRepository(db)),
        office_repo=OfficeRepository(db),
        service_repo=ServiceRepository(db),
        staff_repo=StaffRepository(db),
    )


async def get_staff_service(db: WriteSession, guard: Guard, scoping: Scoping) -> StaffService:
    return StaffService(
        guard=guard,
        scoping=scoping,
        staff_repo=StaffRepository(db),
        user_repo=UserRepository(db),
        role_repo=RoleRepository(db),
        role_permission_repo=RolePermissionRepository(db),
        office_repo=OfficeRepository(db),
    )


def _availability_service(
    db: AsyncSession, guard: AuthorizationService, scoping: ScopingService
) -> AvailabilityService:
    return AvailabilityService(
        guard=guard,
        scoping=scoping,
        offices=OfficeService(
            guard=guard,
            scoping=scoping,
            office_repo=OfficeRepository(db),
            service_repo=ServiceRepository(db),
            staff_repo=StaffRepository(db),
        ),
        availability_repo=OfficeAvailabilityRepository(db),
        appointment_repo=AppointmentRepository(db),
    )


async def get_availability_service(
    db: WriteSession, guard: Guard, scoping: Scoping
) -> AvailabilityService:
    return _availability_service(db, guard, scoping)


async def get_availability_reader(
    db: ReadSession, guard: Guard, scoping: Scoping
) -> AvailabilityService:
    return _availability_service(db, guard, scoping)
