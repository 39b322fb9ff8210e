"""Permission application service: create with format and duplicate checks."""

from __future__ import annotations

from portal.application.dtos.role import PermissionResult
from portal.application.interfaces.repositories import IPermissionRepository
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.scoping_service import ScopingService
from portal.domain.enums import DenialReason
from portal.domain.exceptions import AuthorizationException, ValidationException
from portal.domain.permissions import WorkflowPermission, parse_permission_name

_MSG_DUPLICATE_PERMISSION = "Permission '%s' already exists"


class PermissionService:
    """List and create permissions. Permissions are never deleted."""

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        permission_repo: IPermissionRepository,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self._repo = permission_repo

    async def list_permissions(self, actor_id: str) -> list[PermissionResult]:
        await self.guard.require(actor_id, "permission:read")
        return await self._repo.list_permissions()

    async def create_permission(
        self, actor_id: str, name: str, description: str | None = None
    ) -> PermissionResult:
        """Create a permission; resource and action are split from the name.

        Raises:
            ValidationException: If the name is malformed or already exists.
        """
        await self.guard.require(actor_id, WorkflowPermission.PERMISSION_MANAGE)
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            raise AuthorizationException(
                message="Forbidden: only an admin may create permissions",
                reason=DenialReason.ROLE_ELEVATION.value,
                scope="role",
            )
        resource, action = parse_permission_name(name)
        clean = f"{resource}:{action}"
        # Best-effort; the unique constraint still backs concurrent creates.
        if await self._repo.get_by_names([clean]):
            raise ValidationException(_MSG_DUPLICATE_PERMISSION % clean, field="name")
        return await self._repo.create_permission(
            name=clean,
            resource=resource,
            action=action,
            description=description,
        )
