"""AppointmentLifecycle: booking gate, immutability, and status transitions."""

from datetime import UTC, datetime

import pytest

from portal.application.dtos.appointment import AppointmentChanges, AppointmentCreate, AppointmentFilter
from portal.application.dtos.request import RequestCreate
from portal.domain.enums import AppointmentStatus, DecisionAction, DenialReason
from portal.domain.exceptions import (
    ActiveAppointmentExistsException,
    AppointmentLockedException,
    AuthorizationException,
    InvalidTransitionException,
    RequestNotFullyApprovedException,
    ResourceNotFoundException,
    ValidationException,
)

WHEN = datetime(2026, 4, 2, tzinfo=UTC)


async def _request(world, approve_staff: bool = True, approve_manager: bool = True):
    request = await world.workflow.create(
        "citizen",
        RequestCreate(service_id="svc_a", current_address="Kazanchis", date=WHEN),
    )
    if approve_staff:
        await world.workflow.decide_as_staff("staff_a", request.id, DecisionAction.APPROVE)
    if approve_manager:
        await world.workflow.decide_as_manager("manager_a", request.id, DecisionAction.APPROVE)
    world.store.outbox.clear()
    return request


async def _book(world, actor_id: str = "citizen", **kwargs):
    request = kwargs.pop("request", None) or await _request(world)
    return await world.lifecycle.create(
        actor_id, AppointmentCreate(request_id=request.id, date=WHEN, time="10:30", **kwargs)
    )


async def test_booking_requires_full_approval(world) -> None:
    half = await _request(world, approve_manager=False)
    with pytest.raises(RequestNotFullyApprovedException) as exc_info:
        await world.lifecycle.create("citizen", AppointmentCreate(request_id=half.id, date=WHEN))
    assert exc_info.value.error_code == "CONFLICT"
    assert world.store.appointments == {}


async def test_booking_refused_for_rejected_request(world) -> None:
    request = await _request(world, approve_manager=False)
    await world.workflow.decide_as_manager("manager_a", request.id, DecisionAction.REJECT)
    with pytest.raises(RequestNotFullyApprovedException):
        await world.lifecycle.create("citizen", AppointmentCreate(request_id=request.id, date=WHEN))


async def test_requester_books_pending_appointment(world) -> None:
    appointment = await _book(world)
    assert appointment.status == AppointmentStatus.PENDING
    assert appointment.user_id == "citizen"
    assert appointment.office_id == "office_a"
    assert appointment.staff_id is None
    assert appointment.time == "10:30"


async def test_staff_booking_defaults_to_own_staff_record_and_requester_owner(world) -> None:
    appointment = await _book(world, actor_id="staff_a")
    assert appointment.staff_id == "st_staff_a"
    assert appointment.user_id == "citizen"


async def test_explicit_staff_must_belong_to_request_office(world) -> None:
    request = await _request(world)
    with pytest.raises(ValidationException) as exc_info:
        await world.lifecycle.create(
            "manager_a",
            AppointmentCreate(request_id=request.id, date=WHEN, staff_id="st_staff_b"),
        )
    assert exc_info.value.details["field"] == "staff_id"

    booked = await world.lifecycle.create(
        "manager_a",
        AppointmentCreate(request_id=request.id, date=WHEN, staff_id="st_staff_a_other"),
    )
    assert booked.staff_id == "st_staff_a_other"


async def test_only_one_active_appointment_per_request(world) -> None:
    request = await _request(world)
    first = await _book(world, request=request)
    with pytest.raises(ActiveAppointmentExistsException):
        await _book(world, request=request)

    await world.lifecycle.decide("staff_a", first.id, DecisionAction.REJECT)
    second = await _book(world, request=request)
    assert second.status == AppointmentStatus.PENDING

    await world.lifecycle.cancel("citizen", second.id)
    third = await _book(world, request=request)
    assert third.id not in (first.id, second.id)


async def test_other_citizen_cannot_book_for_request(world) -> None:
    request = await _request(world)
    with pytest.raises(AuthorizationException) as exc_info:
        await world.lifecycle.create("citizen2", AppointmentCreate(request_id=request.id, date=WHEN))
    assert exc_info.value.reason == DenialReason.NOT_OWNER.value


async def test_staff_of_other_office_cannot_book(world) -> None:
    request = await _request(world)
    with pytest.raises(AuthorizationException) as exc_info:
        await world.lifecycle.create("staff_b", AppointmentCreate(request_id=request.id, date=WHEN))
    assert exc_info.value.reason == DenialReason.OUT_OF_SCOPE.value


async def test_booking_unknown_request_is_not_found(world) -> None:
    with pytest.raises(ResourceNotFoundException):
        await world.lifecycle.create("citizen", AppointmentCreate(request_id="missing", date=WHEN))


async def test_update_while_pending_then_locked_after_approval(world) -> None:
    appointment = await _book(world)
    moved = await world.lifecycle.update(
        "citizen", appointment.id, AppointmentChanges(time="14:00", notes="Bring photo")
    )
    assert moved.time == "14:00"
    assert moved.notes == "Bring photo"

    await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.APPROVE)
    with pytest.raises(AppointmentLockedException) as exc_info:
        await world.lifecycle.update("citizen", appointment.id, AppointmentChanges(time="15:00"))
    assert exc_info.value.message == "Cannot update approved or completed appointment"
    with pytest.raises(AppointmentLockedException):
        await world.lifecycle.delete("citizen", appointment.id)
    assert world.store.appointments[appointment.id].time == "14:00"


@pytest.mark.parametrize("completed", [False, True])
async def test_empty_update_of_locked_appointment_is_conflict(world, completed: bool) -> None:
    appointment = await _book(world)
    await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.APPROVE)
    if completed:
        await world.lifecycle.complete("manager_a", appointment.id)
    with pytest.raises(AppointmentLockedException) as exc_info:
        await world.lifecycle.update("citizen", appointment.id, AppointmentChanges())
    assert exc_info.value.message == "Cannot update approved or completed appointment"


async def test_empty_update_of_pending_appointment_is_a_no_op(world) -> None:
    appointment = await _book(world)
    unchanged = await world.lifecycle.update("citizen", appointment.id, AppointmentChanges())
    assert unchanged == world.store.appointments[appointment.id]


async def test_explicit_none_clears_time_and_notes(world) -> None:
    appointment = await _book(world, notes="Bring photo")
    cleared = await world.lifecycle.update(
        "citizen", appointment.id, AppointmentChanges(time=None, notes=None)
    )
    assert cleared.time is None
    assert cleared.notes is None
    assert cleared.date == appointment.date


def test_changes_only_carry_sent_fields() -> None:
    assert AppointmentChanges().as_values() == {}
    assert AppointmentChanges(notes=None).as_values() == {"notes": None}
    assert AppointmentChanges(time="09:00").as_values() == {"time": "09:00"}


async def test_delete_pending_appointment(world) -> None:
    appointment = await _book(world)
    await world.lifecycle.delete("citizen", appointment.id)
    assert appointment.id not in world.store.appointments


async def test_access_is_owner_or_same_office(world) -> None:
    appointment = await _book(world)
    for reader in ("citizen", "staff_a", "staff_a_other", "manager_a", "admin"):
        assert (await world.lifecycle.get(reader, appointment.id)).id == appointment.id
    for outsider in ("citizen2", "staff_b", "manager_b"):
        with pytest.raises(AuthorizationException):
            await world.lifecycle.get(outsider, appointment.id)
    with pytest.raises(AuthorizationException):
        await world.lifecycle.update("manager_b", appointment.id, AppointmentChanges(notes="x"))


async def test_decide_sets_deciding_staff_and_notifies(world) -> None:
    appointment = await _book(world)
    approved = await world.lifecycle.decide("manager_a", appointment.id, DecisionAction.APPROVE)
    assert approved.status == AppointmentStatus.APPROVED
    assert approved.staff_id == "st_manager_a"
    assert world.outbox.topics() == ["appointment.approved"]
    assert "2026-04-02 10:30" in world.store.outbox[0][1]


async def test_decide_requires_assignment_for_staff(world) -> None:
    appointment = await _book(world)
    with pytest.raises(AuthorizationException) as exc_info:
        await world.lifecycle.decide("staff_a_other", appointment.id, DecisionAction.APPROVE)
    assert exc_info.value.reason == DenialReason.NOT_ASSIGNED.value


async def test_requester_cannot_decide(world) -> None:
    appointment = await _book(world)
    with pytest.raises(AuthorizationException) as exc_info:
        await world.lifecycle.decide("citizen", appointment.id, DecisionAction.APPROVE)
    assert exc_info.value.details["permission"] == "appointment:approve"


async def test_complete_only_from_approved(world) -> None:
    appointment = await _book(world)
    with pytest.raises(InvalidTransitionException) as exc_info:
        await world.lifecycle.complete("staff_a", appointment.id)
    assert exc_info.value.details["allowed_from"] == ["approved"]

    await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.APPROVE)
    done = await world.lifecycle.complete("staff_a", appointment.id)
    assert done.status == AppointmentStatus.COMPLETED


async def test_completed_is_terminal(world) -> None:
    appointment = await _book(world)
    await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.APPROVE)
    await world.lifecycle.complete("manager_a", appointment.id)
    with pytest.raises(InvalidTransitionException):
        await world.lifecycle.cancel("citizen", appointment.id)
    with pytest.raises(InvalidTransitionException):
        await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.REJECT)


async def test_requester_cannot_complete(world) -> None:
    appointment = await _book(world)
    await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.APPROVE)
    with pytest.raises(AuthorizationException) as exc_info:
        await world.lifecycle.complete("citizen", appointment.id)
    assert exc_info.value.reason == DenialReason.OUT_OF_SCOPE.value


async def test_cancel_approved_appointment_frees_the_request(world) -> None:
    request = await _request(world)
    appointment = await _book(world, request=request)
    await world.lifecycle.decide("staff_a", appointment.id, DecisionAction.APPROVE)
    cancelled = await world.lifecycle.cancel("citizen", appointment.id)
    assert cancelled.status == AppointmentStatus.CANCELLED
    assert world.outbox.topics()[-1] == "appointment.cancelled"
    assert (await _book(world, request=request)).status == AppointmentStatus.PENDING


async def test_list_scoping(world) -> None:
    mine = await _book(world)
    other_request = await world.workflow.create(
        "citizen2", RequestCreate(service_id="svc_b", current_address="Hawassa", date=WHEN)
    )
    await world.workflow.decide_as_staff("staff_b", other_request.id, DecisionAction.APPROVE)
    await world.workflow.decide_as_manager("manager_b", other_request.id, DecisionAction.APPROVE)
    theirs = await world.lifecycle.create(
        "citizen2", AppointmentCreate(request_id=other_request.id, date=WHEN)
    )

    def ids(results):
        return {a.id for a in results}

    everything = AppointmentFilter()
    assert ids(await world.lifecycle.list_appointments("citizen", everything)) == {mine.id}
    assert ids(await world.lifecycle.list_appointments("staff_a", everything)) == {mine.id}
    assert ids(await world.lifecycle.list_appointments("manager_b", everything)) == {theirs.id}
    assert ids(await world.lifecycle.list_appointments("admin", everything)) == {
        mine.id,
        theirs.id,
    }
    assert ids(
        await world.lifecycle.list_appointments("citizen", AppointmentFilter(user_id="citizen2"))
    ) == {mine.id}
