"""Resolves actor -> role -> permission set from the DB (implements IGrantResolver)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.authorization import ActorGrants
from portal.domain.enums import RoleKind
from portal.infrastructure.persistence.models.permission import Permission, RolePermission
from portal.infrastructure.persistence.models.role import Role
from portal.infrastructure.persistence.models.user import User
from portal.infrastructure.persistence.retry import retry_read


class PermissionResolver:
    """One outer-joined query per call; no caching, so role edits apply immediately."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        retry_attempts: int = 3,
        retry_backoff_seconds: float = 0.05,
    ) -> None:
        self.db = db
        self.retry_attempts = retry_attempts
        self.retry_backoff_seconds = retry_backoff_seconds

    async def get_actor_grants(self, user_id: str) -> ActorGrants | None:
        """Return grants, or None if the user does not exist."""
        query = (
            select(User.id, User.is_active, User.role_id, Role.kind, Permission.name)
            .outerjoin(Role, Role.id == User.role_id)
            .outerjoin(RolePermission, RolePermission.role_id == Role.id)
            .outerjoin(Permission, Permission.id == RolePermission.permission_id)
            .where(User.id == user_id)
        )

        async def run():
            result = await self.db.execute(query)
            return result.all()

        rows = await retry_read(
            self.db,
            run,
            attempts=self.retry_attempts,
            backoff_seconds=self.retry_backoff_seconds,
            description="permission lookup",
        )
        if not rows:
            return None
        first = rows[0]
        return ActorGrants(
            user_id=first.id,
            is_active=bool(first.is_active),
            role_id=first.role_id,
            role_kind=RoleKind(first.kind) if first.kind else None,
            permissions=frozenset(r.name for r in rows if r.name),
        )
