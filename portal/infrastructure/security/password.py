"""Password hashing for portal accounts.

bcrypt only reads the first 72 bytes of its input, so passwords are reduced
to a fixed-length SHA-256 digest (base64) before hashing.
"""

import base64
import hashlib

import bcrypt


def _digest(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


class BcryptPasswordHasher:
    """hash_password / verify_password pair used by the user service and scripts."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_digest(password), bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Return False for a mismatch or a malformed stored hash."""
        try:
            return bool(bcrypt.checkpw(_digest(password), hashed_password.encode("utf-8")))
        except (ValueError, TypeError):
            return False
