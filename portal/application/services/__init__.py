"""Application services: authorization guard, scoping, catalogue, feedback and accounts."""

from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.availability_service import AvailabilityService
from portal.application.services.feedback_service import FeedbackService
from portal.application.services.office_service import OfficeService
from portal.application.services.permission_service import PermissionService
from portal.application.services.role_service import RoleService, role_conventions
from portal.application.services.scoping_service import ScopingService
from portal.application.services.staff_service import StaffService
from portal.application.services.user_service import UserService

__all__ = [
    "AuthorizationService",
    "AvailabilityService",
    "FeedbackService",
    "OfficeService",
    "PermissionService",
    "RoleService",
    "ScopingService",
    "StaffService",
    "UserService",
    "role_conventions",
]
