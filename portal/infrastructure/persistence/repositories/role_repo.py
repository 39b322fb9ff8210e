"""Role repository. Names are compared case-insensitively within an office."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.role import RoleResult
from portal.domain.enums import RoleKind
from portal.domain.exceptions import ValidationException
from portal.infrastructure.persistence.models.role import Role
from portal.infrastructure.persistence.repositories.base import BaseRepository


def _role_to_result(r: Role) -> RoleResult:
    return RoleResult(
        id=r.id,
        name=r.name,
        kind=RoleKind(r.kind),
        office_id=r.office_id,
        description=r.description,
    )


def _office_clause(office_id: str | None):
    return Role.office_id.is_(None) if office_id is None else Role.office_id == office_id


class RoleRepository(BaseRepository[Role]):
    """Platform roles (office_id NULL) and office roles."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        role = await self._get_model(role_id)
        return _role_to_result(role) if role else None

    async def get_by_name(self, name: str, office_id: str | None) -> RoleResult | None:
        result = await self.db.execute(
            select(Role).where(
                func.lower(Role.name) == name.strip().lower(),
                _office_clause(office_id),
            )
        )
        role = result.scalar_one_or_none()
        return _role_to_result(role) if role else None

    async def get_by_kind(self, kind: RoleKind, office_id: str | None) -> RoleResult | None:
        """Earliest role of kind in the office (or among platform roles)."""
        result = await self.db.execute(
            select(Role)
            .where(Role.kind == kind.value, _office_clause(office_id))
            .order_by(Role.created_at, Role.id)
            .limit(1)
        )
        role = result.scalar_one_or_none()
        return _role_to_result(role) if role else None

    async def list_roles(
        self, office_id: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[RoleResult]:
        stmt = select(Role)
        if office_id is not None:
            stmt = stmt.where(Role.office_id == office_id)
        result = await self.db.execute(
            stmt.order_by(Role.office_id.nulls_first(), Role.name).offset(skip).limit(limit)
        )
        return [_role_to_result(r) for r in result.scalars().all()]

    async def create_role(
        self,
        name: str,
        kind: RoleKind,
        office_id: str | None,
        description: str | None = None,
    ) -> RoleResult:
        role = Role(name=name, kind=kind.value, office_id=office_id, description=description)
        try:
            created = await self._add(role)
        except IntegrityError:
            raise ValidationException(
                f"Role with name '{name}' already exists", field="name"
            ) from None
        return _role_to_result(created)
