"""Tests for auth endpoints. Services are swapped for in-memory ones via dependency_overrides."""

import pytest
from httpx import AsyncClient

from portal.api.v1.dependencies import get_user_read_service, get_user_service
from portal.application.services import UserService
from portal.infrastructure.security.jwt import verify_token
from portal.main import app
from tests.fakes import FakeRoleRepository, FakeUserRepository


class PlainHasher:
    def hash_password(self, password: str) -> str:
        return f"hashed:{password}"

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return hashed_password == f"hashed:{password}"


@pytest.fixture
def user_service(world) -> UserService:
    service = UserService(
        FakeUserRepository(world.store),
        FakeRoleRepository(world.store),
        PlainHasher(),
        world.guard,
        world.scoping,
    )
    app.dependency_overrides[get_user_service] = lambda: service
    app.dependency_overrides[get_user_read_service] = lambda: service
    return service


async def test_login_missing_body_returns_422(client: AsyncClient, user_service) -> None:
    response = await client.post("/api/v1/auth/login", json={})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_signup_bad_phone_returns_422(client: AsyncClient, user_service) -> None:
    response = await client.post(
        "/api/v1/auth/signup", json={"phone_number": "12-34-5", "password": "s3cret-pass"}
    )
    assert response.status_code == 422


async def test_signup_short_password_returns_422(client: AsyncClient, user_service) -> None:
    response = await client.post(
        "/api/v1/auth/signup", json={"phone_number": "0911234567", "password": "abc"}
    )
    assert response.status_code == 422


async def test_signup_then_login(client: AsyncClient, world, user_service) -> None:
    """Signup normalizes the phone number; login accepts the local form."""
    response = await client.post(
        "/api/v1/auth/signup",
        json={"phone_number": "0911234567", "password": "s3cret-pass", "username": "abebe"},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["phone_number"] == "+251911234567"
    assert created["role_id"] == world.role_ids["customer"]

    response = await client.post(
        "/api/v1/auth/login", json={"login": "0911 234 567", "password": "s3cret-pass"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert verify_token(body["access_token"]) == created["id"]


async def test_signup_duplicate_phone_returns_400(client: AsyncClient, user_service) -> None:
    payload = {"phone_number": "0911234567", "password": "s3cret-pass"}
    assert (await client.post("/api/v1/auth/signup", json=payload)).status_code == 201
    response = await client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "phone_number"}


async def test_login_invalid_credentials_returns_401(client: AsyncClient, user_service) -> None:
    """Unknown login and wrong password share one generic message."""
    response = await client.post(
        "/api/v1/auth/login", json={"login": "nobody", "password": "password123"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"
    assert response.headers["WWW-Authenticate"] == "Bearer"
