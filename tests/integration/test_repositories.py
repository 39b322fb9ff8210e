"""Repository integration tests. Require Postgres; session is rolled back after each test."""

from datetime import UTC, date, datetime

import pytest

from portal.application.dtos.appointment import AppointmentCreate
from portal.application.dtos.request import RequestCreate, RequestFilter
from portal.domain.entities.availability import AvailabilityConfig, ClosedRange, DaySchedule
from portal.domain.enums import (
    AppointmentStatus,
    ApprovalStatus,
    CombinedRequestStatus,
    DecisionAction,
    RoleKind,
)
from portal.infrastructure.persistence.repositories import (
    AppointmentRepository,
    FeedbackRepository,
    NotificationOutboxRepository,
    OfficeAvailabilityRepository,
    OfficeRepository,
    RequestRepository,
    RoleRepository,
    ScopeRepository,
    ServiceRepository,
    StaffRepository,
    UserRepository,
)
from portal.infrastructure.persistence.repositories.notification_repo import OUTBOX_PENDING_KEY
from portal.infrastructure.services import PermissionResolver
from portal.infrastructure.services.rbac_seed_service import RbacSeedService

pytestmark = pytest.mark.requires_db


async def _office_with_request(db_session):
    office = await OfficeRepository(db_session).create_office("Repo Test Office", None, None)
    service = await ServiceRepository(db_session).create_service(office.id, "Repo Service", None)
    requester = await UserRepository(db_session).create_user(
        phone_number="+251900000101", hashed_password="x", role_id=None
    )
    clerk = await UserRepository(db_session).create_user(
        phone_number="+251900000102", hashed_password="x", role_id=None
    )
    staff = await StaffRepository(db_session).create_staff(clerk.id, office.id)
    request = await RequestRepository(db_session).create_request(
        requester.id,
        RequestCreate(
            service_id=service.id, current_address="Bole", date=datetime(2026, 4, 2, tzinfo=UTC)
        ),
    )
    return office, service, staff, request


async def test_create_request_joins_office_and_phone(db_session) -> None:
    office, service, _, request = await _office_with_request(db_session)
    assert request.office_id == office.id
    assert request.service_id == service.id
    assert request.requester_phone == "+251900000101"
    assert request.status_by_staff == ApprovalStatus.PENDING
    assert request.combined_status == CombinedRequestStatus.PENDING


async def test_decide_is_conditional_on_current_status(db_session) -> None:
    _, _, staff, request = await _office_with_request(db_session)
    repo = RequestRepository(db_session)

    approved = await repo.decide_staff_track(request.id, DecisionAction.APPROVE, staff.id, None)
    assert approved is not None
    assert approved.approving_staff_id == staff.id
    assert await repo.decide_staff_track(request.id, DecisionAction.APPROVE, staff.id, None) is None

    rejected = await repo.decide_staff_track(request.id, DecisionAction.REJECT, staff.id, "No ID")
    assert rejected.status_by_staff == ApprovalStatus.REJECTED
    assert rejected.approving_staff_id is None
    assert rejected.approve_note == "No ID"


async def test_edit_and_delete_only_while_both_tracks_pending(db_session) -> None:
    _, _, staff, request = await _office_with_request(db_session)
    repo = RequestRepository(db_session)
    edited = await repo.update_if_editable(request.id, {"current_address": "Piassa"})
    assert edited.current_address == "Piassa"

    await repo.decide_manager_track(request.id, DecisionAction.APPROVE, staff.id, None)
    assert await repo.update_if_editable(request.id, {"current_address": "Merkato"}) is None
    assert not await repo.delete_if_editable(request.id)


async def test_list_requests_by_combined_status_and_assignment(db_session) -> None:
    office, service, staff, request = await _office_with_request(db_session)
    repo = RequestRepository(db_session)
    by_office = RequestFilter(office_id=office.id, status=CombinedRequestStatus.PENDING)
    assert [r.id for r in await repo.list_requests(by_office)] == [request.id]

    assigned = RequestFilter(office_id=office.id, assigned_staff_id=staff.id)
    assert await repo.list_requests(assigned) == []
    assert await ServiceRepository(db_session).assign_staff(service.id, staff.id)
    assert [r.id for r in await repo.list_requests(assigned)] == [request.id]


async def test_scope_repository_resolves_offices(db_session) -> None:
    office, service, staff, request = await _office_with_request(db_session)
    scope = ScopeRepository(db_session)
    assert await scope.get_service_office_id(service.id) == office.id
    assert await scope.get_request_office_id(request.id) == office.id
    assert await scope.get_appointment_office_id("missing") is None
    assert not await scope.is_staff_assigned(service.id, staff.id)
    profile = await scope.get_actor_profile(staff.user_id)
    assert profile.office_id == office.id
    assert profile.staff_id == staff.id


async def test_rbac_seed_is_idempotent_and_resolver_sees_grants(db_session) -> None:
    await RbacSeedService(db_session).seed()
    again = await RbacSeedService(db_session).seed()
    assert (again.permissions_created, again.roles_created, again.grants_added) == (0, 0, 0)

    staff_role = await RoleRepository(db_session).get_by_kind(RoleKind.STAFF, None)
    user = await UserRepository(db_session).create_user(
        phone_number="+251900000201", hashed_password="x", role_id=staff_role.id
    )
    grants = await PermissionResolver(db_session).get_actor_grants(user.id)
    assert grants.role_kind == RoleKind.STAFF
    assert "request:approve-staff" in grants.permissions
    assert "request:approve-manager" not in grants.permissions
    assert await PermissionResolver(db_session).get_actor_grants("missing-user") is None


async def test_outbox_enqueue_claim_and_mark(db_session) -> None:
    outbox = NotificationOutboxRepository(db_session)
    await outbox.enqueue("+251900000301", "hello", "request.fully_approved")
    assert db_session.info.pop(OUTBOX_PENDING_KEY) is True

    claimed = await outbox.claim_pending(100)
    mine = [row for row in claimed if row[1] == "+251900000301"]
    assert len(mine) == 1
    notification_id, _, message, attempts = mine[0]
    assert (message, attempts) == ("hello", 0)

    await outbox.mark_attempt_failed(notification_id, "gateway down", give_up=False)
    await outbox.mark_sent(notification_id, datetime.now(UTC))
    remaining = {row[0] for row in await outbox.claim_pending(100)}
    assert notification_id not in remaining


async def test_availability_is_stored_per_office_and_replaced(db_session) -> None:
    office, _, _, _ = await _office_with_request(db_session)
    repo = OfficeAvailabilityRepository(db_session)
    assert await repo.get_for_office(office.id) is None

    config = AvailabilityConfig(
        slot_minutes=20,
        closed_ranges=(ClosedRange(date(2026, 12, 24), date(2026, 12, 26), "Holidays"),),
        closed_dates=frozenset({date(2026, 5, 1)}),
        overrides={date(2026, 4, 4): DaySchedule("10:00", "12:00")},
    )
    assert await repo.save(office.id, config) == config
    assert await repo.get_for_office(office.id) == config

    changed = AvailabilityConfig(slot_minutes=45)
    await repo.save(office.id, changed)
    assert await repo.get_for_office(office.id) == changed


async def test_feedback_upsert_keeps_one_row_per_request(db_session) -> None:
    _, _, _, request = await _office_with_request(db_session)
    repo = FeedbackRepository(db_session)
    assert await repo.get_for_request(request.id) is None

    first = await repo.upsert(request.id, 5, "Quick")
    second = await repo.upsert(request.id, 2, None)
    assert second.id == first.id
    assert (second.rating, second.comment) == (2, None)
    assert await repo.get_for_request(request.id) == second


async def test_booked_times_cover_active_appointments_of_the_day(db_session) -> None:
    office, _, staff, request = await _office_with_request(db_session)
    repo = AppointmentRepository(db_session)
    day = datetime(2026, 4, 2, 7, 30, tzinfo=UTC)
    first = await repo.create_appointment(
        request.user_id, staff.id, AppointmentCreate(request_id=request.id, date=day, time="10:30")
    )
    await repo.transition(
        first.id, AppointmentStatus.CANCELLED, frozenset({AppointmentStatus.PENDING})
    )
    await repo.create_appointment(
        request.user_id, staff.id, AppointmentCreate(request_id=request.id, date=day, time="11:00")
    )

    assert await repo.booked_times(office.id, date(2026, 4, 2)) == ["11:00"]
    assert await repo.booked_times(office.id, date(2026, 4, 3)) == []
    assert await repo.booked_times("other-office", date(2026, 4, 2)) == []
