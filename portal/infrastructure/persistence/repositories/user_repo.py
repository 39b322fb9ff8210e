"""User repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.user import UserCredentials, UserResult
from portal.domain.exceptions import ValidationException
from portal.infrastructure.persistence.models.user import User
from portal.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        phone_number=u.phone_number,
        username=u.username,
        email=u.email,
        is_active=u.is_active,
        role_id=u.role_id,
    )


class UserRepository(BaseRepository[User]):
    """Lookup by id or login, create, set role and active flag."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self._get_model(user_id)
        return _user_to_result(user) if user else None

    async def get_credentials(self, login: str) -> UserCredentials | None:
        """Match on phone number or username."""
        result = await self.db.execute(
            select(User)
            .where(or_(User.phone_number == login, User.username == login))
            .order_by(User.created_at, User.id)
            .limit(1)
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return UserCredentials(user=_user_to_result(user), hashed_password=user.hashed_password)

    async def create_user(
        self,
        phone_number: str,
        hashed_password: str,
        role_id: str | None,
        username: str | None = None,
        email: str | None = None,
    ) -> UserResult:
        user = User(
            phone_number=phone_number,
            hashed_password=hashed_password,
            role_id=role_id,
            username=username,
            email=email,
        )
        try:
            created = await self._add(user)
        except IntegrityError:
            raise ValidationException(
                "Phone number, username or email already registered"
            ) from None
        return _user_to_result(created)

    async def set_role(self, user_id: str, role_id: str | None) -> UserResult | None:
        updated = await self._update_fields(user_id, {"role_id": role_id})
        return _user_to_result(updated) if updated else None

    async def set_active(self, user_id: str, is_active: bool) -> UserResult | None:
        updated = await self._update_fields(user_id, {"is_active": is_active})
        return _user_to_result(updated) if updated else None
