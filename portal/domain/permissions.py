"""Permission names, format rules, and the default role catalogue.

Permission names stay data-driven strings of the form ``resource:action``;
new ones may be added at runtime by an admin. The names the request
workflow and appointment lifecycle depend on are listed in
WorkflowPermission so that code never spells them by hand.
"""

import re
from enum import Enum
from typing import TypedDict

from portal.domain.enums import RoleKind
from portal.domain.exceptions import ValidationException

PERMISSION_NAME_RE = re.compile(r"^[a-z][a-z0-9_-]*:[a-z][a-z0-9_-]*$")
PERMISSION_NAME_MAX_LENGTH = 100


class WorkflowPermission(str, Enum):
    """Closed list of permissions referenced directly by workflow code."""

    REQUEST_CREATE = "request:create"
    REQUEST_READ = "request:read"
    REQUEST_UPDATE = "request:update"
    REQUEST_DELETE = "request:delete"
    REQUEST_APPROVE_STAFF = "request:approve-staff"
    REQUEST_APPROVE_MANAGER = "request:approve-manager"
    APPOINTMENT_CREATE = "appointment:create"
    APPOINTMENT_READ = "appointment:read"
    APPOINTMENT_UPDATE = "appointment:update"
    APPOINTMENT_DELETE = "appointment:delete"
    APPOINTMENT_APPROVE = "appointment:approve"
    ROLE_CREATE = "role:create"
    ROLE_MANAGE = "role:manage"
    PERMISSION_MANAGE = "permission:manage"
    USER_MANAGE = "user:manage"


def parse_permission_name(name: str) -> tuple[str, str]:
    """Validate a permission name and split it into (resource, action).

    Raises:
        ValidationException: If the name is not lowercase ``resource:action``.
    """
    value = name.strip()
    if len(value) > PERMISSION_NAME_MAX_LENGTH or not PERMISSION_NAME_RE.fullmatch(value):
        raise ValidationException(
            f"Invalid permission name '{name}': expected 'resource:action' "
            "(lowercase letters, digits, '-' or '_')",
            field="name",
        )
    resource, action = value.split(":", 1)
    return resource, action


class RoleData(TypedDict):
    """Role configuration for default platform roles."""

    kind: RoleKind
    description: str
    permissions: list[str]


SYSTEM_PERMISSIONS: list[tuple[str, str]] = [
    ("request:create", "Submit service requests"),
    ("request:read", "View service requests"),
    ("request:update", "Edit own requests; admins set approval notes"),
    ("request:delete", "Delete own requests while still pending"),
    ("request:approve-staff", "Decide the staff approval track"),
    ("request:approve-manager", "Decide the manager approval track"),
    ("appointment:create", "Create appointments for fully approved requests"),
    ("appointment:read", "View appointments"),
    ("appointment:update", "Edit, complete or cancel appointments"),
    ("appointment:delete", "Delete appointments that are not yet approved"),
    ("appointment:approve", "Approve or reject appointments"),
    ("office:create", "Create offices"),
    ("office:read", "View offices"),
    ("office:update", "Update offices and their status"),
    ("office:configure", "Configure office opening hours and appointment slots"),
    ("service:create", "Create services"),
    ("service:read", "View services"),
    ("service:update", "Update services"),
    ("service:assign-staff", "Assign staff to services"),
    ("staff:create", "Add staff members to an office"),
    ("staff:read", "View staff members"),
    ("feedback:read", "View feedback on requests"),
    ("feedback:create", "Rate a request and leave a comment"),
    ("user:read", "View users"),
    ("user:update", "Activate or deactivate users"),
    ("user:manage", "Assign roles to users"),
    ("role:read", "View roles"),
    ("role:create", "Create roles"),
    ("role:manage", "Replace the permission set of a role"),
    ("permission:read", "View permissions"),
    ("permission:manage", "Create permissions"),
]

ALL_PERMISSION_NAMES: list[str] = [name for name, _ in SYSTEM_PERMISSIONS]

DEFAULT_ROLES: dict[str, RoleData] = {
    "admin": {
        "kind": RoleKind.ADMIN,
        "description": "Platform administrator with every permission",
        "permissions": ALL_PERMISSION_NAMES,
    },
    "manager": {
        "kind": RoleKind.MANAGER,
        "description": "Office manager: decides the manager track for the office",
        "permissions": [
            "office:read",
            "office:configure",
            "service:create",
            "service:read",
            "service:update",
            "service:assign-staff",
            "staff:create",
            "staff:read",
            "feedback:read",
            "user:read",
            "user:manage",
            "role:read",
            "request:read",
            "request:approve-manager",
            "appointment:create",
            "appointment:read",
            "appointment:update",
            "appointment:approve",
        ],
    },
    "staff": {
        "kind": RoleKind.STAFF,
        "description": "Office staff: decides the staff track for assigned services",
        "permissions": [
            "office:read",
            "service:read",
            "staff:read",
            "feedback:read",
            "request:read",
            "request:approve-staff",
            "appointment:create",
            "appointment:read",
            "appointment:update",
            "appointment:approve",
        ],
    },
    "customer": {
        "kind": RoleKind.CUSTOMER,
        "description": "Citizen submitting service requests",
        "permissions": [
            "office:read",
            "service:read",
            "request:create",
            "request:read",
            "request:update",
            "request:delete",
            "appointment:create",
            "appointment:read",
            "appointment:update",
            "appointment:delete",
            "feedback:read",
            "feedback:create",
        ],
    },
}
