"""RolePermission repository: the role -> permission link table."""

from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.infrastructure.persistence.models.permission import Permission, RolePermission
from portal.shared.utils.generators import generate_cuid


class RolePermissionRepository:
    """Query and replace the permission set of a role."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permission_names(self, role_id: str) -> set[str]:
        result = await self.db.execute(
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
        )
        return set(result.scalars().all())

    async def get_permission_ids(self, role_id: str) -> list[str]:
        result = await self.db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return list(result.scalars().all())

    async def replace_permissions(self, role_id: str, permission_ids: list[str]) -> None:
        """Delete then insert within the caller's transaction."""
        await self.db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        unique_ids = list(dict.fromkeys(permission_ids))
        if unique_ids:
            await self.db.execute(
                insert(RolePermission),
                [
                    {"id": generate_cuid(), "role_id": role_id, "permission_id": pid}
                    for pid in unique_ids
                ],
            )
        await self.db.flush()
