"""Bearer authentication dependencies.

The token is checked before any database session is opened, so a missing
or bad token is a 401 even when the database is down or not configured.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.domain.exceptions import AuthenticationException
from portal.infrastructure.security.jwt import create_access_token, verify_token
from portal.infrastructure.security.password import BcryptPasswordHasher
from portal.shared.context import set_current_user

_http_bearer = HTTPBearer(auto_error=False)


class AuthSecurity:
    """Token creation and password hashing provided via DI."""

    def __init__(self, hasher: BcryptPasswordHasher | None = None) -> None:
        self._hasher = hasher or BcryptPasswordHasher()

    def create_access_token(self, user_id: str) -> str:
        return create_access_token(user_id)

    def hash_password(self, password: str) -> str:
        return self._hasher.hash_password(password)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return self._hasher.verify_password(password, hashed_password)


def get_auth_security() -> AuthSecurity:
    return AuthSecurity()


async def get_current_user_id_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Return the token subject, or None when no valid bearer token was sent."""
    if not credentials:
        return None
    try:
        user_id = verify_token(credentials.credentials)
    except ValueError:
        return None
    set_current_user(user_id)
    return user_id


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str:
    """Return the authenticated user id; 401 if the token is missing or invalid.

    Whether the user still exists and is active is decided by the guard on
    each operation.
    """
    if not credentials:
        raise AuthenticationException()
    try:
        user_id = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException("Invalid or expired token") from e
    set_current_user(user_id)
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
OptionalUserId = Annotated[str | None, Depends(get_current_user_id_optional)]
