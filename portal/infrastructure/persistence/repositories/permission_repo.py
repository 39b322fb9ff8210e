"""Permission repository. Permissions are immutable once created."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.role import PermissionResult
from portal.domain.exceptions import ValidationException
from portal.infrastructure.persistence.models.permission import Permission
from portal.infrastructure.persistence.repositories.base import BaseRepository


def _permission_to_result(p: Permission) -> PermissionResult:
    return PermissionResult(
        id=p.id,
        name=p.name,
        resource=p.resource,
        action=p.action,
        description=p.description,
    )


class PermissionRepository(BaseRepository[Permission]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def list_permissions(self) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission).order_by(Permission.resource, Permission.action)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def get_by_ids(self, permission_ids: list[str]) -> list[PermissionResult]:
        if not permission_ids:
            return []
        result = await self.db.execute(
            select(Permission).where(Permission.id.in_(permission_ids))
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def get_by_names(self, names: list[str]) -> list[PermissionResult]:
        if not names:
            return []
        result = await self.db.execute(select(Permission).where(Permission.name.in_(names)))
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def create_permission(
        self, name: str, resource: str, action: str, description: str | None
    ) -> PermissionResult:
        try:
            created = await self._add(
                Permission(name=name, resource=resource, action=action, description=description)
            )
        except IntegrityError:
            raise ValidationException(
                f"Permission '{name}' already exists", field="name"
            ) from None
        return _permission_to_result(created)
