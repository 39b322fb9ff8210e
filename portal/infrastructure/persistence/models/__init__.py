"""Persistence models: ORM entities and mixins."""

from portal.infrastructure.persistence.models.appointment import Appointment
from portal.infrastructure.persistence.models.availability import OfficeAvailability
from portal.infrastructure.persistence.models.feedback import CustomerSatisfaction
from portal.infrastructure.persistence.models.mixins import (
    CuidMixin,
    PortalModel,
    TimestampMixin,
)
from portal.infrastructure.persistence.models.notification import NotificationOutbox
from portal.infrastructure.persistence.models.office import Office
from portal.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from portal.infrastructure.persistence.models.request import ServiceRequest
from portal.infrastructure.persistence.models.role import Role
from portal.infrastructure.persistence.models.service import (
    Service,
    ServiceStaffAssignment,
)
from portal.infrastructure.persistence.models.staff import Staff
from portal.infrastructure.persistence.models.user import User

__all__ = [
    "Appointment",
    "CuidMixin",
    "CustomerSatisfaction",
    "NotificationOutbox",
    "Office",
    "OfficeAvailability",
    "Permission",
    "PortalModel",
    "Role",
    "RolePermission",
    "Service",
    "ServiceRequest",
    "ServiceStaffAssignment",
    "Staff",
    "TimestampMixin",
    "User",
]
