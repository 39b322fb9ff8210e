"""FastAPI dependencies (composition root).

Routes depend only on these; repositories and infrastructure services are
built here.
"""

from portal.api.v1.dependencies.auth import (
    AuthSecurity,
    CurrentUserId,
    OptionalUserId,
    get_auth_security,
    get_current_user_id,
    get_current_user_id_optional,
)
from portal.api.v1.dependencies.db import get_write_session
from portal.api.v1.dependencies.offices import (
    get_availability_reader,
    get_availability_service,
    get_office_service,
    get_public_office_service,
    get_staff_service,
)
from portal.api.v1.dependencies.rbac import (
    Guard,
    Scoping,
    get_authorization_service,
    get_permission_service,
    get_role_service,
    get_scoping_service,
    get_user_read_service,
    get_user_service,
)
from portal.api.v1.dependencies.workflow import (
    get_appointment_lifecycle,
    get_appointment_reader,
    get_feedback_reader,
    get_feedback_service,
    get_request_reader,
    get_request_workflow,
)

__all__ = [
    "AuthSecurity",
    "CurrentUserId",
    "Guard",
    "OptionalUserId",
    "Scoping",
    "get_appointment_lifecycle",
    "get_appointment_reader",
    "get_auth_security",
    "get_authorization_service",
    "get_availability_reader",
    "get_availability_service",
    "get_current_user_id",
    "get_current_user_id_optional",
    "get_feedback_reader",
    "get_feedback_service",
    "get_office_service",
    "get_permission_service",
    "get_public_office_service",
    "get_request_reader",
    "get_request_workflow",
    "get_role_service",
    "get_scoping_service",
    "get_staff_service",
    "get_user_read_service",
    "get_user_service",
    "get_write_session",
]
