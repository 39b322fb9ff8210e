"""Guard, scoping, and user/role/permission service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.services import (
    AuthorizationService,
    PermissionService,
    RoleService,
    ScopingService,
    UserService,
    role_conventions,
)
from portal.core.config import get_settings
from portal.infrastructure.persistence.database import get_db
from portal.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    ScopeRepository,
    UserRepository,
)
from portal.infrastructure.services import PermissionResolver

from . import auth
from .db import get_write_session

ReadSession = Annotated[AsyncSession, Depends(get_db)]
WriteSession = Annotated[AsyncSession, Depends(get_write_session)]


async def get_authorization_service(db: ReadSession) -> AuthorizationService:
    """Guard backed by a fresh DB lookup per check (no permission cache)."""
    settings = get_settings()
    resolver = PermissionResolver(
        db,
        retry_attempts=settings.db_read_retry_attempts,
        retry_backoff_seconds=settings.db_read_retry_backoff_seconds,
    )
    return AuthorizationService(resolver)


async def get_scoping_service(db: ReadSession) -> ScopingService:
    return ScopingService(ScopeRepository(db))


Guard = Annotated[AuthorizationService, Depends(get_authorization_service)]
Scoping = Annotated[ScopingService, Depends(get_scoping_service)]


async def get_user_service(
    db: WriteSession,
    guard: Guard,
    scoping: Scoping,
    auth_security: Annotated[auth.AuthSecurity, Depends(auth.get_auth_security)],
) -> UserService:
    return UserService(
        user_repo=UserRepository(db),
        role_repo=RoleRepository(db),
        auth_security=auth_security,
        guard=guard,
        scoping=scoping,
    )


async def get_user_read_service(
    db: ReadSession,
    guard: Guard,
    scoping: Scoping,
    auth_security: Annotated[auth.AuthSecurity, Depends(auth.get_auth_security)],
) -> UserService:
    """User service on the read session (login, profile)."""
    return UserService(
        user_repo=UserRepository(db),
        role_repo=RoleRepository(db),
        auth_security=auth_security,
        guard=guard,
        scoping=scoping,
    )


async def get_role_service(db: WriteSession, guard: Guard, scoping: Scoping) -> RoleService:
    settings = get_settings()
    return RoleService(
        guard=guard,
        scoping=scoping,
        role_repo=RoleRepository(db),
        permission_repo=PermissionRepository(db),
        role_permission_repo=RolePermissionRepository(db),
        user_repo=UserRepository(db),
        conventions=role_conventions(
            admin=settings.admin_role_name,
            manager=settings.manager_role_name,
            staff=settings.staff_role_name,
            customer=settings.customer_role_name,
        ),
    )


async def get_permission_service(
    db: WriteSession, guard: Guard, scoping: Scoping
) -> PermissionService:
    return PermissionService(guard=guard, scoping=scoping, permission_repo=PermissionRepository(db))
