"""Infrastructure services: grant resolution, RBAC seeding, notification relay."""

from portal.infrastructure.services.notification_relay import NotificationRelay
from portal.infrastructure.services.permission_resolver import PermissionResolver
from portal.infrastructure.services.rbac_seed_service import RbacSeedService, SeedReport

__all__ = ["NotificationRelay", "PermissionResolver", "RbacSeedService", "SeedReport"]
