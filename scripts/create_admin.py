"""Create the first platform admin user.

Usage:
    python -m scripts.create_admin <phone_number> [username] [password]
If password is omitted, a random one is printed. Run scripts.seed_rbac first.
"""

import asyncio
import secrets
import sys
from pathlib import Path

from dotenv import load_dotenv

from portal.core.config import get_settings
from portal.domain.enums import RoleKind
from portal.domain.exceptions import SqlNotConfiguredException, ValidationException
from portal.infrastructure.persistence.database import transactional_session
from portal.infrastructure.persistence.repositories import RoleRepository, UserRepository
from portal.infrastructure.security import BcryptPasswordHasher
from portal.shared.utils import normalize_phone_number


async def main() -> None:
    if len(sys.argv) < 2:
        print(
            "Usage: python -m scripts.create_admin <phone_number> [username] [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=True)
    try:
        phone_number = normalize_phone_number(sys.argv[1])
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    username = sys.argv[2] if len(sys.argv) > 2 else None
    password = sys.argv[3] if len(sys.argv) > 3 else secrets.token_urlsafe(12)

    settings = get_settings()
    try:
        async with transactional_session() as session:
            role_repo = RoleRepository(session)
            role = await role_repo.get_by_name(
                settings.admin_role_name, None
            ) or await role_repo.get_by_kind(RoleKind.ADMIN, None)
            if role is None:
                print("Admin role not found; run scripts.seed_rbac first", file=sys.stderr)
                sys.exit(1)
            user = await UserRepository(session).create_user(
                phone_number=phone_number,
                hashed_password=BcryptPasswordHasher().hash_password(password),
                role_id=role.id,
                username=username,
            )
    except SqlNotConfiguredException:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)
    except ValidationException as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)
    print(f"Created admin: {user.id} ({user.phone_number}) with role {role.name}")
    print(f"Password: {password}")


if __name__ == "__main__":
    asyncio.run(main())
