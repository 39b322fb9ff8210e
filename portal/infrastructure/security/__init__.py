"""Security: access tokens and password hashing."""

from portal.infrastructure.security.jwt import create_access_token, verify_token
from portal.infrastructure.security.password import BcryptPasswordHasher

__all__ = [
    "BcryptPasswordHasher",
    "create_access_token",
    "verify_token",
]
