"""Access tokens for portal users.

The subject claim carries the user id; roles and permissions are never put
in the token, so a role change applies on the very next request.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from portal.core.config import get_settings


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Encode a signed token for user_id, expiring after the configured TTL."""
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(UTC)
    claims: dict[str, Any] = {"sub": user_id, "iat": now, "exp": now + ttl}
    return cast(
        str,
        jwt.encode(
            claims,
            settings.secret_key.get_secret_value(),
            algorithm=settings.algorithm,
        ),
    )


def verify_token(token: str) -> str:
    """Decode token and return its subject (user id).

    Raises:
        ValueError: If the token is malformed, expired, or has no subject.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ValueError("Token missing required claim: sub")
    return subject
