"""Acting user as seen by office scoping."""

from dataclasses import dataclass

from portal.domain.enums import RoleKind


@dataclass(frozen=True)
class ActorProfile:
    """Who is acting and on behalf of which office.

    office_id and staff_id come from the actor's first staff membership;
    both are None for customers and for admins without a membership.
    """

    user_id: str
    role_kind: RoleKind | None
    staff_id: str | None = None
    office_id: str | None = None
    role_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role_kind == RoleKind.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role_kind == RoleKind.MANAGER

    @property
    def is_staff(self) -> bool:
        return self.role_kind == RoleKind.STAFF

    @property
    def is_office_tier(self) -> bool:
        """Managers and staff act only within their own office."""
        return self.role_kind is not None and self.role_kind.is_office_tier
