"""Role application service: create roles, replace permission sets, assign roles.

Elevation rules are keyed on RoleKind, never on the display name. Only an
admin may hand out a manager or admin role; office-tier actors are limited
to platform roles and roles of their own office, and to users of their own
office (or with no membership yet).
"""

from __future__ import annotations

import logging

from portal.application.dtos.role import RoleResult
from portal.application.dtos.user import UserResult
from portal.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.scoping_service import ScopingService
from portal.domain.entities.actor import ActorProfile
from portal.domain.enums import DenialReason, RoleKind
from portal.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.domain.permissions import WorkflowPermission
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

PRIVILEGED_KINDS = frozenset({RoleKind.ADMIN, RoleKind.MANAGER})
_MSG_UNKNOWN_PERMISSIONS = "One or more permissions not found"


def role_conventions(
    admin: str = "admin",
    manager: str = "manager",
    staff: str = "staff",
    customer: str = "customer",
) -> dict[RoleKind, tuple[str, ...]]:
    """Name conventions used to infer a kind for roles created without one."""
    return {
        RoleKind.ADMIN: (admin, "administrator"),
        RoleKind.MANAGER: (manager, "office_manager"),
        RoleKind.STAFF: (staff, "office_staff"),
        RoleKind.CUSTOMER: (customer, "citizen"),
    }


def elevation_denied(message: str) -> AuthorizationException:
    return AuthorizationException(
        message=f"Forbidden: {message}",
        reason=DenialReason.ROLE_ELEVATION.value,
        scope="role",
    )


def out_of_scope(message: str) -> AuthorizationException:
    return AuthorizationException(
        message=f"Forbidden: {message}",
        reason=DenialReason.OUT_OF_SCOPE.value,
        scope="office",
    )


class RoleService:
    """Role catalogue management and the role-assignment guard."""

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        user_repo: IUserRepository,
        conventions: dict[RoleKind, tuple[str, ...]] | None = None,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.role_repo = role_repo
        self.permission_repo = permission_repo
        self.role_permission_repo = role_permission_repo
        self.user_repo = user_repo
        self.conventions = conventions or role_conventions()

    async def list_roles(
        self, actor_id: str, office_id: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[RoleResult]:
        await self.guard.require(actor_id, "role:read")
        return await self.role_repo.list_roles(office_id=office_id, skip=skip, limit=limit)

    @traced("role.create")
    async def create_role(
        self,
        actor_id: str,
        name: str,
        kind: RoleKind | None = None,
        office_id: str | None = None,
        description: str | None = None,
    ) -> RoleResult:
        """Create a role; the kind is inferred from the name when not given.

        Non-admin actors may only create non-privileged roles in their own office.
        """
        await self.guard.require(actor_id, WorkflowPermission.ROLE_CREATE)
        actor = await self.scoping.actor_profile(actor_id)
        resolved_kind = kind or RoleKind.infer(name, self.conventions)
        if not actor.is_admin:
            if resolved_kind in PRIVILEGED_KINDS:
                raise elevation_denied("only an admin may create manager or admin roles")
            if office_id is None or office_id != actor.office_id:
                raise out_of_scope("roles may only be created for your own office")
        clean_name = name.strip()
        if not clean_name:
            raise ValidationException("Role name is required", field="name")
        existing = await self.role_repo.get_by_name(clean_name, office_id)
        if existing:
            raise ValidationException(
                f"Role with name '{clean_name}' already exists", field="name"
            )
        created = await self.role_repo.create_role(
            name=clean_name,
            kind=resolved_kind,
            office_id=office_id,
            description=description,
        )
        logger.info(
            "Role %s created (kind=%s, office=%s) by %s",
            created.id,
            resolved_kind.value,
            office_id,
            actor_id,
        )
        return created

    @traced("role.replace_permissions")
    async def replace_permissions(
        self, actor_id: str, role_id: str, permission_ids: list[str]
    ) -> list[str]:
        """Replace a role's permission set atomically; return the new names.

        Admin-kind roles always hold every permission, whatever is requested.

        Raises:
            ValidationException: If any permission id does not exist.
        """
        await self.guard.require(actor_id, WorkflowPermission.ROLE_MANAGE)
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            raise elevation_denied("only an admin may change role permissions")
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)

        if role.kind == RoleKind.ADMIN:
            permissions = await self.permission_repo.list_permissions()
        else:
            wanted = list(dict.fromkeys(permission_ids))
            permissions = await self.permission_repo.get_by_ids(wanted)
            if len(permissions) != len(wanted):
                raise ValidationException(_MSG_UNKNOWN_PERMISSIONS, field="permission_ids")

        await self.role_permission_repo.replace_permissions(
            role_id, [p.id for p in permissions]
        )
        logger.info(
            "Role %s permissions replaced by %s (%d permissions)",
            role_id,
            actor_id,
            len(permissions),
        )
        return sorted(p.name for p in permissions)

    async def get_role_permissions(self, actor_id: str, role_id: str) -> set[str]:
        await self.guard.require(actor_id, "role:read")
        if await self.role_repo.get_by_id(role_id) is None:
            raise ResourceNotFoundException("role", role_id)
        return await self.role_permission_repo.get_permission_names(role_id)

    async def check_assignment(
        self, actor: ActorProfile, role: RoleResult, target: ActorProfile
    ) -> None:
        """Role-assignment guard for non-admin actors."""
        if actor.is_admin:
            return
        if role.kind in PRIVILEGED_KINDS:
            raise elevation_denied("only an admin may assign manager or admin roles")
        if target.role_kind in PRIVILEGED_KINDS:
            raise elevation_denied("only an admin may change a manager or admin role")
        if role.office_id is not None and role.office_id != actor.office_id:
            raise out_of_scope("role belongs to another office")
        if target.office_id is not None and target.office_id != actor.office_id:
            raise out_of_scope("user belongs to another office")

    @traced("role.assign")
    async def assign_role(self, actor_id: str, user_id: str, role_id: str) -> UserResult:
        """Set a user's role, subject to the role-assignment guard."""
        await self.guard.require(actor_id, WorkflowPermission.USER_MANAGE)
        actor = await self.scoping.actor_profile(actor_id)
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        target = await self.scope_target(user_id)
        await self.check_assignment(actor, role, target)
        updated = await self.user_repo.set_role(user_id, role.id)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        logger.info(
            "User %s assigned role %s (%s) by %s", user_id, role.id, role.kind.value, actor_id
        )
        return updated

    async def scope_target(self, user_id: str) -> ActorProfile:
        target = await self.scoping.find_profile(user_id)
        if target is None:
            raise ResourceNotFoundException("user", user_id)
        return target
