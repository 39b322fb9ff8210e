"""Staff memberships: add a user to an office and give them an office role."""

from __future__ import annotations

import logging

from portal.application.dtos.office import StaffResult
from portal.application.dtos.role import RoleResult
from portal.application.interfaces.repositories import (
    IOfficeRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IStaffRepository,
    IUserRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.role_service import (
    PRIVILEGED_KINDS,
    elevation_denied,
    out_of_scope,
)
from portal.application.services.scoping_service import ScopingService
from portal.domain.enums import RoleKind
from portal.domain.exceptions import (
    DuplicateAssignmentException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class StaffService:
    """Create and list staff memberships.

    A manager always adds staff to their own office with the office's staff
    role. An admin picks the office and may add a manager instead.
    """

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        staff_repo: IStaffRepository,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        role_permission_repo: IRolePermissionRepository,
        office_repo: IOfficeRepository,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.staff_repo = staff_repo
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.role_permission_repo = role_permission_repo
        self.office_repo = office_repo

    async def list_staff(
        self, actor_id: str, office_id: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[StaffResult]:
        """Office-tier actors only ever see their own office."""
        await self.guard.require(actor_id, "staff:read")
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            if actor.office_id is None:
                raise out_of_scope("no office membership")
            office_id = actor.office_id
        return await self.staff_repo.list_staff(office_id=office_id, skip=skip, limit=limit)

    async def office_role(self, kind: RoleKind, office_id: str) -> RoleResult:
        """Return the office's role of kind, creating it from the platform role if missing."""
        existing = await self.role_repo.get_by_kind(kind, office_id)
        if existing:
            return existing
        role = await self.role_repo.create_role(
            name=kind.value,
            kind=kind,
            office_id=office_id,
            description=f"{kind.value.capitalize()} of office {office_id}",
        )
        template = await self.role_repo.get_by_kind(kind, None)
        if template is not None:
            ids = await self.role_permission_repo.get_permission_ids(template.id)
            await self.role_permission_repo.replace_permissions(role.id, ids)
            logger.info(
                "Created %s role %s for office %s with %d permissions",
                kind.value,
                role.id,
                office_id,
                len(ids),
            )
        return role

    @traced("staff.create")
    async def create_staff(
        self,
        actor_id: str,
        user_id: str,
        office_id: str | None = None,
        make_manager: bool = False,
    ) -> StaffResult:
        """Add user_id to an office and give them the office staff (or manager) role.

        Raises:
            DuplicateAssignmentException: If the user is already staff of the office.
        """
        await self.guard.require(actor_id, "staff:create")
        actor = await self.scoping.actor_profile(actor_id)
        if actor.is_admin:
            if office_id is None:
                raise ValidationException("office_id is required", field="office_id")
            kind = RoleKind.MANAGER if make_manager else RoleKind.STAFF
        else:
            if not actor.is_manager or actor.office_id is None:
                raise out_of_scope("only a manager may add staff to their office")
            office_id = actor.office_id
            kind = RoleKind.STAFF

        if await self.office_repo.get_by_id(office_id) is None:
            raise ResourceNotFoundException("office", office_id)
        target = await self.scoping.find_profile(user_id)
        if target is None:
            raise ResourceNotFoundException("user", user_id)
        if not actor.is_admin:
            if target.role_kind in PRIVILEGED_KINDS:
                raise elevation_denied("only an admin may change a manager or admin role")
            if target.office_id is not None and target.office_id != office_id:
                raise out_of_scope("user belongs to another office")
        if await self.staff_repo.get_membership(user_id, office_id):
            raise DuplicateAssignmentException(
                "User is already a staff member of this office",
                "staff",
                {"user_id": user_id, "office_id": office_id},
            )

        staff = await self.staff_repo.create_staff(user_id, office_id)
        role = await self.office_role(kind, office_id)
        await self.user_repo.set_role(user_id, role.id)
        logger.info(
            "User %s added to office %s as %s by %s", user_id, office_id, kind.value, actor_id
        )
        return staff
