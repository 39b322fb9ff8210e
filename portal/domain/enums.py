"""Domain enumerations for the service portal.

Enums represent fixed sets of domain values (role kinds, approval and
appointment statuses).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RoleKind(_ValuesMixin, str, Enum):
    """Capability tier of a role, independent of its display name.

    All scoping and elevation rules are driven by the kind; the name is
    only used to infer a kind when a role is created without one.
    """

    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    CUSTOMER = "customer"
    CUSTOM = "custom"

    @classmethod
    def infer(cls, name: str, conventions: dict["RoleKind", tuple[str, ...]]) -> "RoleKind":
        """Map a role name to a kind using case-insensitive name conventions.

        Args:
            name: Role display name (e.g. 'Office_Manager').
            conventions: Accepted names per kind, e.g. {MANAGER: ('manager', 'office_manager')}.

        Returns:
            Matching kind, or CUSTOM when no convention matches.
        """
        key = name.strip().lower()
        for kind, names in conventions.items():
            if key in {n.lower() for n in names}:
                return kind
        return cls.CUSTOM

    @property
    def is_office_tier(self) -> bool:
        """True for kinds whose authority is limited to one office."""
        return self in (RoleKind.MANAGER, RoleKind.STAFF)


class ApprovalStatus(_ValuesMixin, str, Enum):
    """Status of one approval track (staff or manager) on a request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CombinedRequestStatus(_ValuesMixin, str, Enum):
    """Read-only projection of both tracks."""

    PENDING = "pending"
    FULLY_APPROVED = "fully_approved"
    REJECTED = "rejected"


class DecisionAction(_ValuesMixin, str, Enum):
    """Outcome chosen by a deciding staff member or manager."""

    APPROVE = "approve"
    REJECT = "reject"


class ApprovalTrack(_ValuesMixin, str, Enum):
    """Which approval dimension a decision applies to."""

    STAFF = "staff"
    MANAGER = "manager"


class AppointmentStatus(_ValuesMixin, str, Enum):
    """Appointment lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @classmethod
    def inactive(cls) -> frozenset["AppointmentStatus"]:
        """Statuses that do not block a new appointment for the same request."""
        return frozenset({cls.REJECTED, cls.CANCELLED})

    @classmethod
    def locked(cls) -> frozenset["AppointmentStatus"]:
        """Statuses after which fields can no longer be edited or the row deleted."""
        return frozenset({cls.APPROVED, cls.COMPLETED})


class OfficeStatus(_ValuesMixin, str, Enum):
    """Office visibility status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class NotificationStatus(_ValuesMixin, str, Enum):
    """Delivery status of an outbox notification."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class PermissionCheckMode(_ValuesMixin, str, Enum):
    """How a list of permissions is combined in a check."""

    ANY = "any"
    ALL = "all"


class DenialReason(_ValuesMixin, str, Enum):
    """Machine-readable reason attached to every authorization denial."""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NO_ROLE = "no_role"
    MISSING_PERMISSION = "missing_permission"
    OUT_OF_SCOPE = "out_of_scope"
    NOT_ASSIGNED = "not_assigned"
    NOT_OWNER = "not_owner"
    ROLE_ELEVATION = "role_elevation"
