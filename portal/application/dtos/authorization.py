"""DTOs for permission resolution and authorization decisions."""

from dataclasses import dataclass

from portal.domain.enums import DenialReason, RoleKind


@dataclass(frozen=True)
class ActorGrants:
    """Actor, role, and the role's permission set resolved in one lookup."""

    user_id: str
    is_active: bool
    role_id: str | None
    role_kind: RoleKind | None
    permissions: frozenset[str]


@dataclass(frozen=True)
class AuthorizationDecision:
    """Allowed, or denied with a machine-readable reason and a message."""

    allowed: bool
    reason_code: DenialReason | None = None
    reason: str | None = None
    permission: str | None = None

    @classmethod
    def allow(cls) -> "AuthorizationDecision":
        return cls(allowed=True)

    @classmethod
    def deny(
        cls,
        reason_code: DenialReason,
        reason: str,
        permission: str | None = None,
    ) -> "AuthorizationDecision":
        return cls(
            allowed=False,
            reason_code=reason_code,
            reason=reason,
            permission=permission,
        )

    def __bool__(self) -> bool:
        return self.allowed
