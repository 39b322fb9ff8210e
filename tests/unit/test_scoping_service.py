"""ScopingService: office resolution and office/assignment/ownership rules."""

from datetime import UTC, datetime

import pytest

from portal.application.dtos.appointment import AppointmentCreate
from portal.application.dtos.request import RequestCreate
from portal.application.dtos.office import StaffResult
from portal.domain.enums import DecisionAction, DenialReason, RoleKind
from portal.domain.exceptions import AuthorizationException, ResourceNotFoundException


async def test_office_of_actor_uses_staff_membership(world) -> None:
    assert await world.scoping.office_of_actor("staff_a") == "office_a"
    assert await world.scoping.office_of_actor("manager_b") == "office_b"
    assert await world.scoping.office_of_actor("citizen") is None
    assert await world.scoping.office_of_actor("ghost") is None


async def test_office_of_actor_first_membership_wins(world) -> None:
    world.store.staff["st_zz_second"] = StaffResult("st_zz_second", "staff_a", "office_b")
    assert await world.scoping.office_of_actor("staff_a") == "office_a"


async def test_office_of_service_and_unknown_service(world) -> None:
    assert await world.scoping.office_of_service("svc_b") == "office_b"
    with pytest.raises(ResourceNotFoundException):
        await world.scoping.office_of_service("missing")


async def test_office_of_request_is_transitive_through_service(world) -> None:
    request = await world.workflow.create(
        "citizen",
        RequestCreate(service_id="svc_b", current_address="Addis", date=datetime.now(UTC)),
    )
    assert await world.scoping.office_of_request(request.id) == "office_b"
    with pytest.raises(ResourceNotFoundException):
        await world.scoping.office_of_request("missing")


async def test_actor_profile_of_unknown_user_is_forbidden(world) -> None:
    with pytest.raises(AuthorizationException) as exc_info:
        await world.scoping.actor_profile("ghost")
    assert exc_info.value.reason == DenialReason.NOT_FOUND.value


async def test_actor_profile_carries_role_kind(world) -> None:
    profile = await world.scoping.actor_profile("manager_a")
    assert profile.role_kind == RoleKind.MANAGER
    assert profile.is_office_tier
    assert profile.staff_id == "st_manager_a"


async def test_in_office_rules(world) -> None:
    admin = await world.scoping.actor_profile("admin")
    manager_a = await world.scoping.actor_profile("manager_a")
    citizen = await world.scoping.actor_profile("citizen")
    assert world.scoping.in_office(admin, "office_b")
    assert world.scoping.in_office(manager_a, "office_a")
    assert not world.scoping.in_office(manager_a, "office_b")
    assert not world.scoping.in_office(citizen, "office_a")


async def test_require_office_scope_mismatch_is_forbidden_not_found(world) -> None:
    manager_a = await world.scoping.actor_profile("manager_a")
    with pytest.raises(AuthorizationException) as exc_info:
        world.scoping.require_office_scope(manager_a, "office_b")
    assert exc_info.value.reason == DenialReason.OUT_OF_SCOPE.value
    assert exc_info.value.details["scope"] == "office"


async def test_require_service_assignment(world) -> None:
    staff_a = await world.scoping.actor_profile("staff_a")
    other = await world.scoping.actor_profile("staff_a_other")
    admin = await world.scoping.actor_profile("admin")
    await world.scoping.require_service_assignment(staff_a, "svc_a")
    await world.scoping.require_service_assignment(admin, "svc_a")
    with pytest.raises(AuthorizationException) as exc_info:
        await world.scoping.require_service_assignment(other, "svc_a")
    assert exc_info.value.reason == DenialReason.NOT_ASSIGNED.value


async def test_require_owner(world) -> None:
    citizen = await world.scoping.actor_profile("citizen")
    world.scoping.require_owner(citizen, "citizen")
    with pytest.raises(AuthorizationException) as exc_info:
        world.scoping.require_owner(citizen, "citizen2")
    assert exc_info.value.reason == DenialReason.NOT_OWNER.value


async def test_find_profile_returns_none_for_unknown(world) -> None:
    assert await world.scoping.find_profile("ghost") is None


async def test_office_of_appointment_follows_its_request(world) -> None:
    request = await world.workflow.create(
        "citizen",
        RequestCreate(service_id="svc_a", current_address="Kazanchis", date=datetime.now(UTC)),
    )
    await world.workflow.decide_as_staff("staff_a", request.id, DecisionAction.APPROVE)
    await world.workflow.decide_as_manager("manager_a", request.id, DecisionAction.APPROVE)
    appointment = await world.lifecycle.create(
        "citizen", AppointmentCreate(request_id=request.id, date=datetime.now(UTC))
    )
    assert await world.scoping.office_of_appointment(appointment.id) == "office_a"
    with pytest.raises(ResourceNotFoundException):
        await world.scoping.office_of_appointment("missing")
