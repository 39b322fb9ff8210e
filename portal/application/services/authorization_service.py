"""Authorization guard: deny-by-default permission checks.

Every check resolves actor -> role -> permission set afresh (one read per
call, no cache) so role edits apply on the next check. Membership is an
exact string match; there are no wildcards or inherited roles.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from portal.application.dtos.authorization import AuthorizationDecision
from portal.application.interfaces.repositories import IGrantResolver
from portal.domain.enums import DenialReason
from portal.domain.exceptions import AuthorizationException
from portal.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


def _permission_name(permission: object) -> str:
    """Accept plain strings or str-valued enums (WorkflowPermission)."""
    value = getattr(permission, "value", permission)
    return str(value)


class AuthorizationService:
    """check / check_any / check_all, plus require_* variants that raise Forbidden."""

    def __init__(self, grant_resolver: IGrantResolver) -> None:
        self.grant_resolver = grant_resolver

    async def _resolve(self, user_id: str) -> frozenset[str] | AuthorizationDecision:
        """Return the permission set, or a denial when the actor cannot hold any."""
        grants = await self.grant_resolver.get_actor_grants(user_id)
        if grants is None:
            return AuthorizationDecision.deny(DenialReason.NOT_FOUND, "not found")
        if not grants.is_active:
            return AuthorizationDecision.deny(DenialReason.INACTIVE, "inactive")
        if grants.role_id is None:
            return AuthorizationDecision.deny(DenialReason.NO_ROLE, "no role")
        return grants.permissions

    @staticmethod
    def _missing(name: str) -> AuthorizationDecision:
        return AuthorizationDecision.deny(
            DenialReason.MISSING_PERMISSION,
            f"permission '{name}' required",
            permission=name,
        )

    @traced("guard.check")
    async def check(self, user_id: str, permission: object) -> AuthorizationDecision:
        """Allow iff the actor is active, has a role, and the role holds permission."""
        name = _permission_name(permission)
        granted = await self._resolve(user_id)
        if isinstance(granted, AuthorizationDecision):
            return self._log(user_id, granted)
        if name in granted:
            return AuthorizationDecision.allow()
        return self._log(user_id, self._missing(name))

    @traced("guard.check_any")
    async def check_any(self, user_id: str, permissions: Iterable[object]) -> AuthorizationDecision:
        """Allow if the role holds at least one of permissions (OR)."""
        names = [_permission_name(p) for p in permissions]
        granted = await self._resolve(user_id)
        if isinstance(granted, AuthorizationDecision):
            return self._log(user_id, granted)
        if any(name in granted for name in names):
            return AuthorizationDecision.allow()
        return self._log(
            user_id,
            AuthorizationDecision.deny(
                DenialReason.MISSING_PERMISSION,
                f"at least one of these permissions required: {', '.join(names)}",
                permission=",".join(names),
            ),
        )

    @traced("guard.check_all")
    async def check_all(self, user_id: str, permissions: Iterable[object]) -> AuthorizationDecision:
        """Allow if the role holds every permission (AND); report the first missing one."""
        names = [_permission_name(p) for p in permissions]
        granted = await self._resolve(user_id)
        if isinstance(granted, AuthorizationDecision):
            return self._log(user_id, granted)
        for name in names:
            if name not in granted:
                return self._log(user_id, self._missing(name))
        return AuthorizationDecision.allow()

    async def get_permissions(self, user_id: str) -> set[str]:
        """Return the effective permission set (empty when inactive or roleless)."""
        granted = await self._resolve(user_id)
        if isinstance(granted, AuthorizationDecision):
            return set()
        return set(granted)

    async def require(self, user_id: str, permission: object) -> None:
        """Raise AuthorizationException unless check() allows."""
        self._raise_if_denied(await self.check(user_id, permission))

    async def require_any(self, user_id: str, permissions: Iterable[object]) -> None:
        self._raise_if_denied(await self.check_any(user_id, permissions))

    async def require_all(self, user_id: str, permissions: Iterable[object]) -> None:
        self._raise_if_denied(await self.check_all(user_id, permissions))

    @staticmethod
    def _raise_if_denied(decision: AuthorizationDecision) -> None:
        if decision.allowed:
            return
        raise AuthorizationException(
            message=f"Forbidden: {decision.reason}",
            reason=decision.reason_code.value if decision.reason_code else None,
            permission=decision.permission,
        )

    @staticmethod
    def _log(user_id: str, decision: AuthorizationDecision) -> AuthorizationDecision:
        if decision.reason_code is not None:
            add_span_attributes(**{"guard.denied": decision.reason_code.value})
        logger.info(
            "Authorization denied for user %s: %s (%s)",
            user_id,
            decision.reason,
            decision.reason_code.value if decision.reason_code else "-",
        )
        return decision
