"""Platform RBAC seeding: system permissions and default platform roles.

Safe to run repeatedly. Missing permissions and roles are created and
default grants are added; grants an admin added by hand are left alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.enums import RoleKind
from portal.domain.permissions import DEFAULT_ROLES, SYSTEM_PERMISSIONS, parse_permission_name
from portal.infrastructure.persistence.models.permission import Permission, RolePermission
from portal.infrastructure.persistence.models.role import Role
from portal.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    permissions_created: int = 0
    roles_created: int = 0
    grants_added: int = 0


class RbacSeedService:
    """Creates SYSTEM_PERMISSIONS and DEFAULT_ROLES as platform roles (office_id NULL)."""

    def __init__(self, db: AsyncSession, role_names: dict[str, str] | None = None) -> None:
        self.db = db
        self.role_names = role_names or {key: key for key in DEFAULT_ROLES}

    async def seed(self) -> SeedReport:
        report = SeedReport()
        permission_map = await self._ensure_permissions(report)
        for key, role_data in DEFAULT_ROLES.items():
            role_id = await self._ensure_role(
                self.role_names.get(key, key), role_data["kind"], role_data["description"], report
            )
            if role_data["kind"] == RoleKind.ADMIN:
                wanted = set(permission_map.values())
            else:
                wanted = {permission_map[name] for name in role_data["permissions"]}
            await self._ensure_grants(role_id, wanted, report)
        await self.db.flush()
        logger.info(
            "RBAC seed: %d permissions, %d roles, %d grants created",
            report.permissions_created,
            report.roles_created,
            report.grants_added,
        )
        return report

    async def _ensure_permissions(self, report: SeedReport) -> dict[str, str]:
        result = await self.db.execute(select(Permission.name, Permission.id))
        permission_map = {name: pid for name, pid in result.all()}
        for name, description in SYSTEM_PERMISSIONS:
            if name in permission_map:
                continue
            resource, action = parse_permission_name(name)
            pid = generate_cuid()
            self.db.add(
                Permission(
                    id=pid,
                    name=name,
                    resource=resource,
                    action=action,
                    description=description,
                )
            )
            permission_map[name] = pid
            report.permissions_created += 1
        await self.db.flush()
        return permission_map

    async def _ensure_role(
        self, name: str, kind: RoleKind, description: str, report: SeedReport
    ) -> str:
        result = await self.db.execute(
            select(Role.id).where(func.lower(Role.name) == name.lower(), Role.office_id.is_(None))
        )
        role_id = result.scalar_one_or_none()
        if role_id is not None:
            return role_id
        role_id = generate_cuid()
        self.db.add(Role(id=role_id, name=name, kind=kind.value, office_id=None, description=description))
        await self.db.flush()
        report.roles_created += 1
        return role_id

    async def _ensure_grants(self, role_id: str, wanted: set[str], report: SeedReport) -> None:
        result = await self.db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        have = set(result.scalars().all())
        for pid in sorted(wanted - have):
            self.db.add(RolePermission(id=generate_cuid(), role_id=role_id, permission_id=pid))
            report.grants_added += 1
