"""Repository interfaces (ports) for the application layer.

Protocols define the persistence contracts the guard, scoping index, and
workflow use cases depend on. Infrastructure implements them with
SQLAlchemy; unit tests implement them in memory.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

from portal.application.dtos.appointment import (
    AppointmentCreate,
    AppointmentFilter,
    AppointmentResult,
)
from portal.application.dtos.authorization import ActorGrants
from portal.application.dtos.feedback import FeedbackResult
from portal.application.dtos.office import OfficeResult, ServiceResult, StaffResult
from portal.application.dtos.request import (
    RequestCreate,
    RequestFilter,
    RequestResult,
)
from portal.application.dtos.role import PermissionResult, RoleResult
from portal.application.dtos.user import UserCredentials, UserResult
from portal.domain.entities.actor import ActorProfile
from portal.domain.entities.availability import AvailabilityConfig
from portal.domain.enums import AppointmentStatus, DecisionAction, OfficeStatus, RoleKind


class IGrantResolver(Protocol):
    """Resolves actor -> role -> permission set in a single read."""

    async def get_actor_grants(self, user_id: str) -> ActorGrants | None:
        """Return grants, or None if the user does not exist."""
        ...


class IScopeRepository(Protocol):
    """Reads backing the office/staff scoping index."""

    async def get_actor_profile(self, user_id: str) -> ActorProfile | None:
        """Return role kind plus first staff membership, or None if no such user."""
        ...

    async def get_service_office_id(self, service_id: str) -> str | None: ...

    async def get_request_office_id(self, request_id: str) -> str | None: ...

    async def get_appointment_office_id(self, appointment_id: str) -> str | None: ...

    async def is_staff_assigned(self, service_id: str, staff_id: str) -> bool: ...


class IUserRepository(Protocol):
    async def get_by_id(self, user_id: str) -> UserResult | None: ...

    async def get_credentials(self, login: str) -> UserCredentials | None:
        """Look up by phone number or username."""
        ...

    async def create_user(
        self,
        phone_number: str,
        hashed_password: str,
        role_id: str | None,
        username: str | None = None,
        email: str | None = None,
    ) -> UserResult: ...

    async def set_role(self, user_id: str, role_id: str | None) -> UserResult | None: ...

    async def set_active(self, user_id: str, is_active: bool) -> UserResult | None: ...


class IRoleRepository(Protocol):
    async def get_by_id(self, role_id: str) -> RoleResult | None: ...

    async def get_by_name(self, name: str, office_id: str | None) -> RoleResult | None:
        """Case-insensitive lookup within the office (or among platform roles)."""
        ...

    async def get_by_kind(self, kind: RoleKind, office_id: str | None) -> RoleResult | None: ...

    async def list_roles(
        self, office_id: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[RoleResult]: ...

    async def create_role(
        self,
        name: str,
        kind: RoleKind,
        office_id: str | None,
        description: str | None = None,
    ) -> RoleResult: ...


class IPermissionRepository(Protocol):
    async def list_permissions(self) -> list[PermissionResult]: ...

    async def get_by_ids(self, permission_ids: list[str]) -> list[PermissionResult]: ...

    async def get_by_names(self, names: list[str]) -> list[PermissionResult]: ...

    async def create_permission(
        self, name: str, resource: str, action: str, description: str | None
    ) -> PermissionResult: ...


class IRolePermissionRepository(Protocol):
    async def get_permission_names(self, role_id: str) -> set[str]: ...

    async def get_permission_ids(self, role_id: str) -> list[str]: ...

    async def replace_permissions(self, role_id: str, permission_ids: list[str]) -> None:
        """Delete the role's rows and insert the new set in the current transaction."""
        ...


class IOfficeRepository(Protocol):
    async def get_by_id(self, office_id: str) -> OfficeResult | None: ...

    async def list_offices(
        self, status: OfficeStatus | None = None, skip: int = 0, limit: int = 100
    ) -> list[OfficeResult]: ...

    async def create_office(
        self, name: str, address: str | None, phone_number: str | None
    ) -> OfficeResult: ...

    async def update_office(self, office_id: str, values: dict[str, object]) -> OfficeResult | None: ...


class IServiceRepository(Protocol):
    async def get_by_id(self, service_id: str) -> ServiceResult | None: ...

    async def list_services(
        self,
        office_id: str | None = None,
        active_offices_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ServiceResult]: ...

    async def create_service(
        self, office_id: str, name: str, description: str | None
    ) -> ServiceResult: ...

    async def update_service(self, service_id: str, values: dict[str, object]) -> ServiceResult | None: ...

    async def list_assigned_staff(self, service_id: str) -> list[StaffResult]: ...

    async def assign_staff(self, service_id: str, staff_id: str) -> bool:
        """Return True if a new assignment was created, False if it already existed."""
        ...

    async def unassign_staff(self, service_id: str, staff_id: str) -> bool: ...


class IStaffRepository(Protocol):
    async def get_by_id(self, staff_id: str) -> StaffResult | None: ...

    async def get_membership(self, user_id: str, office_id: str) -> StaffResult | None: ...

    async def list_staff(self, office_id: str | None = None, skip: int = 0, limit: int = 100) -> list[StaffResult]: ...

    async def create_staff(self, user_id: str, office_id: str) -> StaffResult: ...


class IRequestRepository(Protocol):
    async def create_request(self, user_id: str, data: RequestCreate) -> RequestResult: ...

    async def get_by_id(self, request_id: str) -> RequestResult | None: ...

    async def get_for_update(self, request_id: str) -> RequestResult | None:
        """Return the request with its row locked until the transaction ends."""
        ...

    async def list_requests(self, filters: RequestFilter) -> list[RequestResult]: ...

    async def update_if_editable(
        self, request_id: str, values: dict[str, object]
    ) -> RequestResult | None:
        """Apply values only while both tracks are pending; None when the CAS fails."""
        ...

    async def delete_if_editable(self, request_id: str) -> bool: ...

    async def decide_staff_track(
        self,
        request_id: str,
        action: DecisionAction,
        staff_id: str | None,
        note: str | None,
    ) -> RequestResult | None:
        """Conditional update of the staff track; None when already in the target state."""
        ...

    async def decide_manager_track(
        self,
        request_id: str,
        action: DecisionAction,
        staff_id: str | None,
        note: str | None,
    ) -> RequestResult | None: ...

    async def set_note(self, request_id: str, note: str | None) -> RequestResult | None: ...


class IAppointmentRepository(Protocol):
    async def create_appointment(
        self, user_id: str, staff_id: str | None, data: AppointmentCreate
    ) -> AppointmentResult:
        """Insert a pending appointment; raises ActiveAppointmentExistsException on the unique index."""
        ...

    async def get_by_id(self, appointment_id: str) -> AppointmentResult | None: ...

    async def has_active_for_request(self, request_id: str) -> bool: ...

    async def list_appointments(self, filters: AppointmentFilter) -> list[AppointmentResult]: ...

    async def update_if_unlocked(
        self, appointment_id: str, values: dict[str, object]
    ) -> AppointmentResult | None: ...

    async def delete_if_unlocked(self, appointment_id: str) -> bool: ...

    async def transition(
        self,
        appointment_id: str,
        target: AppointmentStatus,
        allowed_from: frozenset[AppointmentStatus],
        staff_id: str | None = None,
    ) -> AppointmentResult | None:
        """Set status only if the current status is in allowed_from; None otherwise."""
        ...

    async def booked_times(self, office_id: str, day: date) -> list[str]:
        """Start times of the office's active appointments on a (UTC) day."""
        ...


class IAvailabilityRepository(Protocol):
    async def get_for_office(self, office_id: str) -> AvailabilityConfig | None: ...

    async def save(self, office_id: str, config: AvailabilityConfig) -> AvailabilityConfig:
        """Insert or replace the office's configuration."""
        ...


class IFeedbackRepository(Protocol):
    async def get_for_request(self, request_id: str) -> FeedbackResult | None: ...

    async def upsert(self, request_id: str, rating: int, comment: str | None) -> FeedbackResult:
        """Create the request's feedback or overwrite it; one row per request."""
        ...


class INotificationOutbox(Protocol):
    """Records a notification in the current transaction for later delivery."""

    async def enqueue(self, destination: str, message: str, topic: str) -> None: ...


class IOutboxStore(Protocol):
    """Relay-side access to pending notifications."""

    async def claim_pending(self, limit: int) -> list[tuple[str, str, str, int]]:
        """Lock and return (id, destination, message, attempts) for pending rows."""
        ...

    async def mark_sent(self, notification_id: str, sent_at: datetime) -> None: ...

    async def mark_attempt_failed(
        self, notification_id: str, error: str, give_up: bool
    ) -> None: ...
