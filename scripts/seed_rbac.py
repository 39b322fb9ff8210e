"""Seed platform RBAC: system permissions, default roles and their grants.

Usage:
    python -m scripts.seed_rbac
Idempotent. Requires DATABASE_URL (Postgres) and an upgraded schema.
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from portal.core.config import get_settings
from portal.domain.exceptions import SqlNotConfiguredException
from portal.infrastructure.persistence.database import transactional_session
from portal.infrastructure.services import RbacSeedService


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=True)


async def main() -> None:
    _load_env()
    settings = get_settings()
    role_names = {
        "admin": settings.admin_role_name,
        "manager": settings.manager_role_name,
        "staff": settings.staff_role_name,
        "customer": settings.customer_role_name,
    }
    try:
        async with transactional_session() as session:
            report = await RbacSeedService(session, role_names=role_names).seed()
    except SqlNotConfiguredException:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)
    print(
        f"Seeded RBAC: {report.permissions_created} permissions, "
        f"{report.roles_created} roles, {report.grants_added} grants"
    )


if __name__ == "__main__":
    asyncio.run(main())
