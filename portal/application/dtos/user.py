"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model (no password hash)."""

    id: str
    phone_number: str
    username: str | None
    email: str | None
    is_active: bool
    role_id: str | None


@dataclass(frozen=True)
class UserCredentials:
    """User plus stored hash; only used by login."""

    user: UserResult
    hashed_password: str
