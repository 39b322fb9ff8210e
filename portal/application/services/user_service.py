"""User application service: signup, credential check, account status."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from portal.application.dtos.user import UserResult
from portal.application.interfaces.repositories import IRoleRepository, IUserRepository
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.scoping_service import ScopingService
from portal.domain.enums import DenialReason, RoleKind
from portal.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class IPasswordHasher(Protocol):
    def hash_password(self, password: str) -> str: ...

    def verify_password(self, password: str, hashed_password: str) -> bool: ...


class UserService:
    """Customer signup and login; admins activate and deactivate accounts."""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        auth_security: IPasswordHasher,
        guard: AuthorizationService,
        scoping: ScopingService,
    ) -> None:
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._auth_security = auth_security
        self.guard = guard
        self.scoping = scoping

    async def signup(
        self,
        phone_number: str,
        password: str,
        username: str | None = None,
        email: str | None = None,
    ) -> UserResult:
        """Create an account holding the platform customer role.

        Raises:
            ValidationException: If the phone number or username is taken.
        """
        if await self._user_repo.get_credentials(phone_number):
            raise ValidationException("Phone number already registered", field="phone_number")
        if username and await self._user_repo.get_credentials(username):
            raise ValidationException("Username already taken", field="username")
        customer_role = await self._role_repo.get_by_kind(RoleKind.CUSTOMER, None)
        if customer_role is None:
            logger.warning("No platform customer role; user %s created without a role", phone_number)
        hashed = await asyncio.to_thread(self._auth_security.hash_password, password)
        return await self._user_repo.create_user(
            phone_number=phone_number,
            hashed_password=hashed,
            role_id=customer_role.id if customer_role else None,
            username=username,
            email=email,
        )

    async def authenticate(self, login: str, password: str) -> UserResult:
        """Return the user for valid credentials (phone number or username).

        Inactive users may not log in.

        Raises:
            AuthenticationException: On unknown login, bad password, or inactive user.
        """
        credentials = await self._user_repo.get_credentials(login)
        if credentials is None:
            raise AuthenticationException("Invalid credentials")
        valid = await asyncio.to_thread(
            self._auth_security.verify_password, password, credentials.hashed_password
        )
        if not valid or not credentials.user.is_active:
            raise AuthenticationException("Invalid credentials")
        return credentials.user

    async def get_user(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def set_active(self, actor_id: str, user_id: str, is_active: bool) -> UserResult:
        """Activate or deactivate a user (admin only)."""
        await self.guard.require(actor_id, "user:update")
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            raise AuthorizationException(
                message="Forbidden: only an admin may change account status",
                reason=DenialReason.ROLE_ELEVATION.value,
                scope="user",
            )
        updated = await self._user_repo.set_active(user_id, is_active)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        logger.info("User %s set active=%s by %s", user_id, is_active, actor_id)
        return updated
