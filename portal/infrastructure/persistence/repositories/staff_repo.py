"""Staff repository: office memberships with the member's identity."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.office import StaffResult
from portal.infrastructure.persistence.models.staff import Staff
from portal.infrastructure.persistence.models.user import User
from portal.infrastructure.persistence.repositories.base import BaseRepository


def staff_row_to_result(
    s: Staff, phone_number: str | None = None, username: str | None = None
) -> StaffResult:
    return StaffResult(
        id=s.id,
        user_id=s.user_id,
        office_id=s.office_id,
        phone_number=phone_number,
        username=username,
        created_at=s.created_at,
    )


class StaffRepository(BaseRepository[Staff]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Staff)

    def _with_user(self):
        return select(Staff, User.phone_number, User.username).join(
            User, User.id == Staff.user_id
        )

    async def get_by_id(self, staff_id: str) -> StaffResult | None:
        result = await self.db.execute(self._with_user().where(Staff.id == staff_id))
        row = result.first()
        return staff_row_to_result(*row) if row else None

    async def get_membership(self, user_id: str, office_id: str) -> StaffResult | None:
        result = await self.db.execute(
            self._with_user()
            .where(Staff.user_id == user_id, Staff.office_id == office_id)
            .order_by(Staff.created_at, Staff.id)
            .limit(1)
        )
        row = result.first()
        return staff_row_to_result(*row) if row else None

    async def list_staff(
        self, office_id: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[StaffResult]:
        stmt = self._with_user()
        if office_id is not None:
            stmt = stmt.where(Staff.office_id == office_id)
        result = await self.db.execute(
            stmt.order_by(Staff.created_at, Staff.id).offset(skip).limit(limit)
        )
        return [staff_row_to_result(*row) for row in result.all()]

    async def create_staff(self, user_id: str, office_id: str) -> StaffResult:
        created = await self._add(Staff(user_id=user_id, office_id=office_id))
        return staff_row_to_result(created)
