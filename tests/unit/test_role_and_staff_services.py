"""RoleService, StaffService and OfficeService rules: elevation, office scope, catalogue."""

import pytest

from portal.domain.enums import DenialReason, OfficeStatus, RoleKind
from portal.domain.exceptions import (
    AuthorizationException,
    DuplicateAssignmentException,
    ResourceNotFoundException,
    ValidationException,
)


async def test_manager_cannot_assign_manager_or_admin_role(world) -> None:
    for role in ("manager", "admin"):
        with pytest.raises(AuthorizationException) as exc_info:
            await world.roles.assign_role("manager_a", "citizen", world.role_ids[role])
        assert exc_info.value.reason == DenialReason.ROLE_ELEVATION.value
    assert world.store.users["citizen"].role_id == world.role_ids["customer"]


async def test_manager_cannot_demote_another_manager(world) -> None:
    with pytest.raises(AuthorizationException) as exc_info:
        await world.roles.assign_role("manager_a", "manager_b", world.role_ids["staff"])
    assert exc_info.value.reason == DenialReason.ROLE_ELEVATION.value


async def test_manager_cannot_touch_user_of_other_office(world) -> None:
    with pytest.raises(AuthorizationException) as exc_info:
        await world.roles.assign_role("manager_a", "staff_b", world.role_ids["customer"])
    assert exc_info.value.reason == DenialReason.OUT_OF_SCOPE.value


async def test_manager_assigns_staff_role_in_own_office(world) -> None:
    updated = await world.roles.assign_role("manager_a", "citizen", world.role_ids["staff"])
    assert updated.role_id == world.role_ids["staff"]


async def test_admin_may_elevate(world) -> None:
    updated = await world.roles.assign_role("admin", "citizen", world.role_ids["manager"])
    assert updated.role_id == world.role_ids["manager"]
    assert await world.guard.check("citizen", "request:approve-manager")


async def test_assign_unknown_role_or_user(world) -> None:
    with pytest.raises(ResourceNotFoundException):
        await world.roles.assign_role("admin", "citizen", "missing")
    with pytest.raises(ResourceNotFoundException):
        await world.roles.assign_role("admin", "ghost", world.role_ids["staff"])


def _grant(world, role: str, permission: str) -> None:
    world.store.grants[world.role_ids[role]].add(
        next(p.id for p in world.store.permissions.values() if p.name == permission)
    )


async def test_create_role_infers_kind_from_name_case_insensitively(world) -> None:
    role = await world.roles.create_role("admin", "Office_Manager", office_id="office_a")
    assert role.kind == RoleKind.MANAGER
    custom = await world.roles.create_role("admin", "Archivist", office_id="office_a")
    assert custom.kind == RoleKind.CUSTOM


async def test_create_role_rejects_duplicate_name_in_same_office(world) -> None:
    await world.roles.create_role("admin", "Archivist", office_id="office_a")
    with pytest.raises(ValidationException):
        await world.roles.create_role("admin", "archivist", office_id="office_a")


async def test_role_creation_needs_role_create_not_role_manage(world) -> None:
    _grant(world, "manager", "role:manage")
    with pytest.raises(AuthorizationException) as exc_info:
        await world.roles.create_role("manager_a", "Archivist", office_id="office_a")
    assert exc_info.value.details["permission"] == "role:create"

    _grant(world, "manager", "role:create")
    role = await world.roles.create_role("manager_a", "Archivist", office_id="office_a")
    assert role.office_id == "office_a"


async def test_non_admin_cannot_create_privileged_role(world) -> None:
    _grant(world, "manager", "role:create")
    with pytest.raises(AuthorizationException) as exc_info:
        await world.roles.create_role("manager_a", "ADMIN", office_id="office_a")
    assert exc_info.value.reason == DenialReason.ROLE_ELEVATION.value
    with pytest.raises(AuthorizationException) as exc_info:
        await world.roles.create_role("manager_a", "Archivist", office_id="office_b")
    assert exc_info.value.reason == DenialReason.OUT_OF_SCOPE.value


async def test_replace_permissions_is_atomic_and_visible_next_check(world) -> None:
    staff_role = world.role_ids["staff"]
    wanted = [p.id for p in world.store.permissions.values() if p.name == "request:read"]
    names = await world.roles.replace_permissions("admin", staff_role, wanted)
    assert names == ["request:read"]
    assert not await world.guard.check("staff_a", "request:approve-staff")
    assert await world.guard.check("staff_a", "request:read")


async def test_replace_permissions_unknown_id_changes_nothing(world) -> None:
    staff_role = world.role_ids["staff"]
    before = set(world.store.grants[staff_role])
    with pytest.raises(ValidationException) as exc_info:
        await world.roles.replace_permissions("admin", staff_role, ["nope"])
    assert exc_info.value.message == "One or more permissions not found"
    assert world.store.grants[staff_role] == before


async def test_admin_role_always_keeps_every_permission(world) -> None:
    names = await world.roles.replace_permissions("admin", world.role_ids["admin"], [])
    assert len(names) == len(world.store.permissions)


async def test_manager_creates_staff_in_own_office_with_office_role(world) -> None:
    staff = await world.staff.create_staff("manager_a", "citizen", office_id="office_b")
    assert staff.office_id == "office_a"
    role = world.store.roles[world.store.users["citizen"].role_id]
    assert role.kind == RoleKind.STAFF
    assert role.office_id == "office_a"
    # The office role copies the platform staff role's permissions.
    assert world.store.permission_names(role.id) == world.store.permission_names(
        world.role_ids["staff"]
    )
    assert await world.scoping.office_of_actor("citizen") == "office_a"


async def test_office_role_is_reused(world) -> None:
    await world.staff.create_staff("manager_a", "citizen")
    await world.staff.create_staff("manager_a", "citizen2")
    assert (
        world.store.users["citizen"].role_id == world.store.users["citizen2"].role_id
    )


async def test_duplicate_membership_is_rejected(world) -> None:
    with pytest.raises(DuplicateAssignmentException):
        await world.staff.create_staff("manager_a", "staff_a")


async def test_admin_may_add_a_manager(world) -> None:
    await world.staff.create_staff("admin", "citizen", office_id="office_b", make_manager=True)
    role = world.store.roles[world.store.users["citizen"].role_id]
    assert role.kind == RoleKind.MANAGER
    assert role.office_id == "office_b"


async def test_admin_must_name_office(world) -> None:
    with pytest.raises(ValidationException):
        await world.staff.create_staff("admin", "citizen")


async def test_list_staff_is_limited_to_own_office(world) -> None:
    listed = await world.staff.list_staff("manager_a", office_id="office_b")
    assert {s.office_id for s in listed} == {"office_a"}


async def test_assign_staff_to_service_checks_office_and_is_idempotent(world) -> None:
    assert await world.offices.assign_staff("manager_a", "svc_a2", "st_staff_a_other")
    assert not await world.offices.assign_staff("manager_a", "svc_a2", "st_staff_a_other")
    with pytest.raises(ValidationException):
        await world.offices.assign_staff("manager_a", "svc_a2", "st_staff_b")
    with pytest.raises(AuthorizationException):
        await world.offices.assign_staff("manager_a", "svc_b", "st_staff_b")


async def test_unassign_staff(world) -> None:
    await world.offices.unassign_staff("manager_a", "svc_a", "st_staff_a")
    assert ("svc_a", "st_staff_a") not in world.store.assignments
    with pytest.raises(ResourceNotFoundException):
        await world.offices.unassign_staff("manager_a", "svc_a", "st_staff_a")


async def test_inactive_office_hidden_from_public_and_outsiders(world) -> None:
    await world.offices.update_office("admin", "office_b", {"status": OfficeStatus.INACTIVE})
    public = await world.offices.list_public_offices()
    assert [o.id for o in public] == ["office_a"]
    assert [s.id for s in await world.offices.list_public_services()] == ["svc_a", "svc_a2"]

    assert (await world.offices.get_office("manager_b", "office_b")).status == OfficeStatus.INACTIVE
    with pytest.raises(ResourceNotFoundException):
        await world.offices.get_office("citizen", "office_b")


async def test_manager_creates_services_only_in_own_office(world) -> None:
    service = await world.offices.create_service("manager_a", "office_a", "Marriage certificate")
    assert service.office_id == "office_a"
    with pytest.raises(AuthorizationException):
        await world.offices.create_service("manager_a", "office_b", "Other")
