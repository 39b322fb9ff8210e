"""SQLAlchemy repositories. Interface methods return application DTOs."""

from portal.infrastructure.persistence.repositories.appointment_repo import AppointmentRepository
from portal.infrastructure.persistence.repositories.availability_repo import (
    OfficeAvailabilityRepository,
)
from portal.infrastructure.persistence.repositories.base import BaseRepository
from portal.infrastructure.persistence.repositories.feedback_repo import FeedbackRepository
from portal.infrastructure.persistence.repositories.notification_repo import (
    NotificationOutboxRepository,
)
from portal.infrastructure.persistence.repositories.office_repo import OfficeRepository
from portal.infrastructure.persistence.repositories.permission_repo import PermissionRepository
from portal.infrastructure.persistence.repositories.request_repo import RequestRepository
from portal.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from portal.infrastructure.persistence.repositories.role_repo import RoleRepository
from portal.infrastructure.persistence.repositories.scope_repo import ScopeRepository
from portal.infrastructure.persistence.repositories.service_repo import ServiceRepository
from portal.infrastructure.persistence.repositories.staff_repo import StaffRepository
from portal.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "AppointmentRepository",
    "BaseRepository",
    "FeedbackRepository",
    "NotificationOutboxRepository",
    "OfficeAvailabilityRepository",
    "OfficeRepository",
    "PermissionRepository",
    "RequestRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "ScopeRepository",
    "ServiceRepository",
    "StaffRepository",
    "UserRepository",
]
