"""API v1 router aggregation."""

from fastapi import APIRouter

from portal.api.v1.endpoints import (
    appointments,
    auth,
    health,
    offices,
    permissions,
    requests,
    roles,
    services,
    staff,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(offices.router, prefix="/offices", tags=["offices"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
