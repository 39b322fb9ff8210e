"""Domain exceptions for the service portal.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class PortalException(Exception):
    """Base exception for all portal errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PortalException):
    """Raised when input validation fails (e.g. invalid format or reference)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PortalException):
    """Raised when no valid actor identity is present (not logged in)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(PortalException):
    """Raised when a permission or office-scope check denies the actor.

    Always carries the failing reason code so callers can tell "no role"
    from "wrong office" from "missing permission".
    """

    def __init__(
        self,
        message: str = "Permission denied",
        reason: str | None = None,
        permission: str | None = None,
        scope: str | None = None,
    ) -> None:
        """Initialize with message and denial context.

        Args:
            message: Human-readable denial message.
            reason: Machine-readable reason code (e.g. 'missing_permission').
            permission: Permission name that was required, when applicable.
            scope: Scope rule that failed (e.g. 'office', 'service_assignment').
        """
        details: dict[str, Any] = {}
        if reason:
            details["reason"] = reason
        if permission:
            details["permission"] = permission
        if scope:
            details["scope"] = scope
        super().__init__(message, "PERMISSION_DENIED", details)

    @property
    def reason(self) -> str | None:
        return self.details.get("reason")


class ResourceNotFoundException(PortalException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'request', 'appointment').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(PortalException):
    """Raised when an operation is illegal in the resource's current state."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CONFLICT", details)


class AlreadyProcessedException(ConflictException):
    """Raised when an approval track was already decided the same way."""

    def __init__(self, request_id: str, track: str, status: str) -> None:
        super().__init__(
            f"Request already {status} by {track}",
            request_id=request_id,
            track=track,
        )


class RequestNotEditableException(ConflictException):
    """Raised when the requester edits or deletes a request after approval began."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            "Request can no longer be edited: approval has started",
            request_id=request_id,
        )


class RequestNotFullyApprovedException(ConflictException):
    """Raised when an appointment is requested before both tracks approved."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            "Appointments can only be created for requests approved by both staff and manager",
            request_id=request_id,
        )


class ActiveAppointmentExistsException(ConflictException):
    """Raised when a request already has a non-rejected, non-cancelled appointment."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            "An active appointment already exists for this request",
            request_id=request_id,
        )


class AppointmentLockedException(ConflictException):
    """Raised when updating or deleting an approved or completed appointment."""

    def __init__(self, appointment_id: str, operation: str) -> None:
        super().__init__(
            f"Cannot {operation} approved or completed appointment",
            appointment_id=appointment_id,
            operation=operation,
        )


class InvalidTransitionException(ConflictException):
    """Raised when an appointment status change is not allowed from its current status."""

    def __init__(self, appointment_id: str, target: str, allowed_from: list[str]) -> None:
        super().__init__(
            f"Appointment cannot move to '{target}' from its current status",
            appointment_id=appointment_id,
            target=target,
            allowed_from=allowed_from,
        )


class DuplicateAssignmentException(PortalException):
    """Raised when an assignment already exists (unique constraint)."""

    def __init__(self, message: str, assignment_type: str, details_extra: dict[str, Any] | None = None) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description.
            assignment_type: 'role_permission', 'service_staff' or 'staff'.
            details_extra: Optional extra keys (e.g. role_id, permission_id).
        """
        details = details_extra or {}
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


class DependencyException(PortalException):
    """Raised when an external collaborator (SMS gateway, store) fails transiently."""

    def __init__(self, dependency: str, message: str) -> None:
        super().__init__(message, "DEPENDENCY_ERROR", {"dependency": dependency})


class SqlNotConfiguredException(PortalException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
