"""Domain rules: combined request status, appointment transitions, permission names, role kinds."""

import pytest

from portal.domain.entities import (
    ApprovalTracks,
    allowed_sources,
    can_transition,
    combine_tracks,
    is_active,
    is_locked,
)
from portal.domain.enums import (
    AppointmentStatus,
    ApprovalStatus,
    CombinedRequestStatus,
    RoleKind,
)
from portal.domain.exceptions import ValidationException
from portal.domain.permissions import (
    ALL_PERMISSION_NAMES,
    DEFAULT_ROLES,
    WorkflowPermission,
    parse_permission_name,
)
from portal.application.services.role_service import role_conventions

P, A, R = ApprovalStatus.PENDING, ApprovalStatus.APPROVED, ApprovalStatus.REJECTED


@pytest.mark.parametrize(
    ("staff", "manager", "expected"),
    [
        (P, P, CombinedRequestStatus.PENDING),
        (A, P, CombinedRequestStatus.PENDING),
        (P, A, CombinedRequestStatus.PENDING),
        (A, A, CombinedRequestStatus.FULLY_APPROVED),
        (R, P, CombinedRequestStatus.REJECTED),
        (A, R, CombinedRequestStatus.REJECTED),
        (R, A, CombinedRequestStatus.REJECTED),
    ],
)
def test_combine_tracks(staff, manager, expected) -> None:
    assert combine_tracks(staff, manager) == expected


def test_combine_tracks_accepts_raw_strings() -> None:
    assert combine_tracks("approved", "approved") == CombinedRequestStatus.FULLY_APPROVED


def test_editable_only_when_both_pending() -> None:
    assert ApprovalTracks(P, P).is_editable_by_requester
    assert not ApprovalTracks(A, P).is_editable_by_requester
    assert not ApprovalTracks(P, R).is_editable_by_requester


def test_appointment_transition_table() -> None:
    assert can_transition(AppointmentStatus.PENDING, AppointmentStatus.APPROVED)
    assert can_transition("pending", AppointmentStatus.REJECTED)
    assert can_transition(AppointmentStatus.APPROVED, AppointmentStatus.COMPLETED)
    assert can_transition(AppointmentStatus.APPROVED, AppointmentStatus.CANCELLED)
    assert not can_transition(AppointmentStatus.PENDING, AppointmentStatus.COMPLETED)
    assert not can_transition(AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)
    assert not can_transition(AppointmentStatus.REJECTED, AppointmentStatus.APPROVED)
    assert allowed_sources(AppointmentStatus.PENDING) == frozenset()


def test_active_and_locked_statuses() -> None:
    assert is_active(AppointmentStatus.PENDING)
    assert is_active(AppointmentStatus.COMPLETED)
    assert not is_active(AppointmentStatus.CANCELLED)
    assert not is_active("rejected")
    assert is_locked(AppointmentStatus.APPROVED)
    assert is_locked(AppointmentStatus.COMPLETED)
    assert not is_locked(AppointmentStatus.PENDING)


def test_parse_permission_name() -> None:
    assert parse_permission_name("request:approve-staff") == ("request", "approve-staff")
    assert parse_permission_name("  audit_log:read ") == ("audit_log", "read")


@pytest.mark.parametrize(
    "name", ["request", "Request:read", "request:", ":read", "request:read:x", "req uest:read"]
)
def test_parse_permission_name_rejects_bad_format(name) -> None:
    with pytest.raises(ValidationException) as exc_info:
        parse_permission_name(name)
    assert exc_info.value.details == {"field": "name"}


def test_system_permissions_cover_workflow_permissions() -> None:
    assert {p.value for p in WorkflowPermission} <= set(ALL_PERMISSION_NAMES)
    for role in DEFAULT_ROLES.values():
        assert set(role["permissions"]) <= set(ALL_PERMISSION_NAMES)


def test_role_kind_inference_is_case_insensitive() -> None:
    conventions = role_conventions(manager="Head")
    assert RoleKind.infer("ADMIN", conventions) == RoleKind.ADMIN
    assert RoleKind.infer(" head ", conventions) == RoleKind.MANAGER
    assert RoleKind.infer("Office_Staff", conventions) == RoleKind.STAFF
    assert RoleKind.infer("Citizen", conventions) == RoleKind.CUSTOMER
    assert RoleKind.infer("auditor", conventions) == RoleKind.CUSTOM
    assert RoleKind.MANAGER.is_office_tier
    assert not RoleKind.ADMIN.is_office_tier
