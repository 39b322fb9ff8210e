"""Service repository, including service-staff assignments."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.office import ServiceResult, StaffResult
from portal.domain.enums import OfficeStatus
from portal.infrastructure.persistence.models.office import Office
from portal.infrastructure.persistence.models.service import Service, ServiceStaffAssignment
from portal.infrastructure.persistence.models.staff import Staff
from portal.infrastructure.persistence.models.user import User
from portal.infrastructure.persistence.repositories.base import BaseRepository
from portal.infrastructure.persistence.repositories.staff_repo import staff_row_to_result
from portal.shared.utils.generators import generate_cuid


def _service_to_result(s: Service) -> ServiceResult:
    return ServiceResult(
        id=s.id,
        office_id=s.office_id,
        name=s.name,
        description=s.description,
    )


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Service)

    async def get_by_id(self, service_id: str) -> ServiceResult | None:
        service = await self._get_model(service_id)
        return _service_to_result(service) if service else None

    async def list_services(
        self,
        office_id: str | None = None,
        active_offices_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ServiceResult]:
        stmt = select(Service)
        if active_offices_only:
            stmt = stmt.join(Office, Office.id == Service.office_id).where(
                Office.status == OfficeStatus.ACTIVE.value
            )
        if office_id is not None:
            stmt = stmt.where(Service.office_id == office_id)
        result = await self.db.execute(stmt.order_by(Service.name).offset(skip).limit(limit))
        return [_service_to_result(s) for s in result.scalars().all()]

    async def create_service(
        self, office_id: str, name: str, description: str | None
    ) -> ServiceResult:
        created = await self._add(
            Service(office_id=office_id, name=name, description=description)
        )
        return _service_to_result(created)

    async def update_service(
        self, service_id: str, values: dict[str, object]
    ) -> ServiceResult | None:
        updated = await self._update_fields(service_id, values)
        return _service_to_result(updated) if updated else None

    async def list_assigned_staff(self, service_id: str) -> list[StaffResult]:
        result = await self.db.execute(
            select(Staff, User.phone_number, User.username)
            .join(ServiceStaffAssignment, ServiceStaffAssignment.staff_id == Staff.id)
            .join(User, User.id == Staff.user_id)
            .where(ServiceStaffAssignment.service_id == service_id)
            .order_by(Staff.created_at, Staff.id)
        )
        return [staff_row_to_result(*row) for row in result.all()]

    async def assign_staff(self, service_id: str, staff_id: str) -> bool:
        """Insert the assignment unless it exists; True if a row was inserted."""
        result = await self.db.execute(
            pg_insert(ServiceStaffAssignment)
            .values(id=generate_cuid(), service_id=service_id, staff_id=staff_id)
            .on_conflict_do_nothing(constraint="uq_service_staff")
            .returning(ServiceStaffAssignment.id)
        )
        return result.scalar_one_or_none() is not None

    async def unassign_staff(self, service_id: str, staff_id: str) -> bool:
        result = await self.db.execute(
            delete(ServiceStaffAssignment)
            .where(
                ServiceStaffAssignment.service_id == service_id,
                ServiceStaffAssignment.staff_id == staff_id,
            )
            .returning(ServiceStaffAssignment.id)
        )
        return result.scalar_one_or_none() is not None
