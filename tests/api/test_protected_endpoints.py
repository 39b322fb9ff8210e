"""Authentication on protected endpoints; no DB needed.

A missing or bad token is rejected before any database session is opened.
"""

import pytest
from httpx import AsyncClient

from portal.infrastructure.persistence import database

PROTECTED = [
    ("get", "/api/v1/users/me"),
    ("get", "/api/v1/requests"),
    ("post", "/api/v1/requests"),
    ("post", "/api/v1/requests/r1/staff-decision"),
    ("post", "/api/v1/requests/r1/manager-decision"),
    ("get", "/api/v1/appointments"),
    ("post", "/api/v1/appointments/a1/complete"),
    ("get", "/api/v1/roles"),
    ("put", "/api/v1/roles/r1/permissions"),
    ("post", "/api/v1/staff"),
    ("get", "/api/v1/offices/o1/availability/slots?date=2026-04-02"),
    ("put", "/api/v1/offices/o1/availability"),
    ("put", "/api/v1/requests/r1/feedback"),
]


@pytest.mark.parametrize(("method", "path"), PROTECTED)
async def test_missing_token_returns_401(client: AsyncClient, method: str, path: str) -> None:
    response = await client.request(method, path, json={})
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_invalid_token_returns_401(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/requests", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


async def test_valid_token_without_database_returns_503(client: AsyncClient, bearer) -> None:
    if database.get_engine() is not None:
        pytest.skip("DATABASE_URL is set")
    response = await client.get("/api/v1/requests", headers=bearer("user-1"))
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"


async def test_public_catalogue_without_database_returns_503(client: AsyncClient) -> None:
    if database.get_engine() is not None:
        pytest.skip("DATABASE_URL is set")
    response = await client.get("/api/v1/offices")
    assert response.status_code == 503
