"""DTOs for role and permission use cases."""

from dataclasses import dataclass

from portal.domain.enums import RoleKind


@dataclass(frozen=True)
class RoleResult:
    """Role read-model."""

    id: str
    name: str
    kind: RoleKind
    office_id: str | None
    description: str | None


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model."""

    id: str
    name: str
    resource: str
    action: str
    description: str | None
