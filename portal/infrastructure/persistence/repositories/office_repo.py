"""Office repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.office import OfficeResult
from portal.domain.enums import OfficeStatus
from portal.infrastructure.persistence.models.office import Office
from portal.infrastructure.persistence.repositories.base import BaseRepository


def _office_to_result(o: Office) -> OfficeResult:
    return OfficeResult(
        id=o.id,
        name=o.name,
        address=o.address,
        phone_number=o.phone_number,
        status=OfficeStatus(o.status),
    )


class OfficeRepository(BaseRepository[Office]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Office)

    async def get_by_id(self, office_id: str) -> OfficeResult | None:
        office = await self._get_model(office_id)
        return _office_to_result(office) if office else None

    async def list_offices(
        self, status: OfficeStatus | None = None, skip: int = 0, limit: int = 100
    ) -> list[OfficeResult]:
        stmt = select(Office)
        if status is not None:
            stmt = stmt.where(Office.status == status.value)
        result = await self.db.execute(stmt.order_by(Office.name).offset(skip).limit(limit))
        return [_office_to_result(o) for o in result.scalars().all()]

    async def create_office(
        self, name: str, address: str | None, phone_number: str | None
    ) -> OfficeResult:
        created = await self._add(Office(name=name, address=address, phone_number=phone_number))
        return _office_to_result(created)

    async def update_office(
        self, office_id: str, values: dict[str, object]
    ) -> OfficeResult | None:
        if isinstance(values.get("status"), OfficeStatus):
            values = {**values, "status": values["status"].value}
        updated = await self._update_fields(office_id, values)
        return _office_to_result(updated) if updated else None
