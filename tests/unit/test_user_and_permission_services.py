"""UserService signup/login/account status and PermissionService creation rules."""

import pytest

from portal.application.services.permission_service import PermissionService
from portal.application.services.user_service import UserService
from portal.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import FakePermissionRepository, FakeRoleRepository, FakeUserRepository


class PlainHasher:
    def hash_password(self, password: str) -> str:
        return f"hashed:{password}"

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return hashed_password == f"hashed:{password}"


@pytest.fixture
def users(world) -> UserService:
    return UserService(
        FakeUserRepository(world.store),
        FakeRoleRepository(world.store),
        PlainHasher(),
        world.guard,
        world.scoping,
    )


@pytest.fixture
def permissions(world) -> PermissionService:
    return PermissionService(world.guard, world.scoping, FakePermissionRepository(world.store))


async def test_signup_grants_customer_role_and_hashes_password(world, users) -> None:
    user = await users.signup("+251911000111", "s3cret-pass", username="abebe")
    assert user.role_id == world.role_ids["customer"]
    assert world.store.users[user.id].hashed_password == "hashed:s3cret-pass"
    assert await world.guard.check(user.id, "request:create")


async def test_signup_rejects_taken_phone_or_username(users) -> None:
    await users.signup("+251911000111", "s3cret-pass", username="abebe")
    with pytest.raises(ValidationException) as exc_info:
        await users.signup("+251911000111", "other-pass")
    assert exc_info.value.details == {"field": "phone_number"}
    with pytest.raises(ValidationException) as exc_info:
        await users.signup("+251911000222", "other-pass", username="abebe")
    assert exc_info.value.details == {"field": "username"}


async def test_authenticate_by_phone_or_username(users) -> None:
    created = await users.signup("+251911000111", "s3cret-pass", username="abebe")
    assert (await users.authenticate("+251911000111", "s3cret-pass")).id == created.id
    assert (await users.authenticate("abebe", "s3cret-pass")).id == created.id


async def test_authenticate_failures_share_one_message(world, users) -> None:
    created = await users.signup("+251911000111", "s3cret-pass")
    for login, password in (("+251911000111", "wrong"), ("nobody", "s3cret-pass")):
        with pytest.raises(AuthenticationException) as exc_info:
            await users.authenticate(login, password)
        assert exc_info.value.message == "Invalid credentials"

    world.store.users[created.id].is_active = False
    with pytest.raises(AuthenticationException):
        await users.authenticate("+251911000111", "s3cret-pass")


async def test_set_active_is_admin_only(world, users) -> None:
    updated = await users.set_active("admin", "staff_a", False)
    assert not updated.is_active
    assert not await world.guard.check("staff_a", "request:read")

    with pytest.raises(AuthorizationException):
        await users.set_active("manager_a", "staff_a", True)
    with pytest.raises(ResourceNotFoundException):
        await users.set_active("admin", "ghost", True)


async def test_get_unknown_user(users) -> None:
    with pytest.raises(ResourceNotFoundException):
        await users.get_user("ghost")


async def test_create_permission_splits_name(world, permissions) -> None:
    created = await permissions.create_permission("admin", " report:export ", "Export reports")
    assert (created.name, created.resource, created.action) == (
        "report:export",
        "report",
        "export",
    )
    names = [p.name for p in await permissions.list_permissions("admin")]
    assert "report:export" in names
    assert names == sorted(names)


async def test_create_permission_rejects_duplicates_and_bad_names(permissions) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await permissions.create_permission("admin", "request:read")
    assert exc_info.value.message == "Permission 'request:read' already exists"
    with pytest.raises(ValidationException):
        await permissions.create_permission("admin", "Report Export")


async def test_create_permission_requires_admin(permissions) -> None:
    with pytest.raises(AuthorizationException) as exc_info:
        await permissions.create_permission("manager_a", "report:export")
    assert exc_info.value.details["permission"] == "permission:manage"
