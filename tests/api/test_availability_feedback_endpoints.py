"""Office availability and request feedback endpoints over the in-memory portal."""

import pytest
from httpx import AsyncClient

from portal.api.v1.dependencies import (
    get_availability_reader,
    get_availability_service,
    get_feedback_reader,
    get_feedback_service,
    get_request_reader,
    get_request_workflow,
)
from portal.main import app

AVAILABILITY = "/api/v1/offices/office_a/availability"


@pytest.fixture
def portal(world):
    app.dependency_overrides[get_availability_service] = lambda: world.availability
    app.dependency_overrides[get_availability_reader] = lambda: world.availability
    app.dependency_overrides[get_feedback_service] = lambda: world.feedback
    app.dependency_overrides[get_feedback_reader] = lambda: world.feedback
    app.dependency_overrides[get_request_workflow] = lambda: world.workflow
    app.dependency_overrides[get_request_reader] = lambda: world.workflow
    return world


async def test_default_availability_and_slots(client: AsyncClient, bearer, portal) -> None:
    response = await client.get(AVAILABILITY, headers=bearer("citizen"))
    assert response.status_code == 200
    body = response.json()
    assert body["office_id"] == "office_a"
    assert body["slot_minutes"] == 30
    assert body["weekly"]["monday"] == {"start": "09:00", "end": "17:00", "open": True}
    assert body["weekly"]["sunday"]["open"] is False
    assert body["closed_dates"] == []

    response = await client.get(
        f"{AVAILABILITY}/slots", params={"date": "2026-04-02"}, headers=bearer("citizen")
    )
    assert response.status_code == 200
    slots = response.json()
    assert slots["date"] == "2026-04-02"
    assert slots["total_slots"] == 16
    assert slots["booked_slots"] == []


async def test_slots_need_a_date(client: AsyncClient, bearer, portal) -> None:
    response = await client.get(f"{AVAILABILITY}/slots", headers=bearer("citizen"))
    assert response.status_code == 422
    response = await client.get(
        f"{AVAILABILITY}/slots", params={"date": "02/04/2026"}, headers=bearer("citizen")
    )
    assert response.status_code == 422


async def test_manager_configures_hours(client: AsyncClient, bearer, portal) -> None:
    response = await client.put(
        AVAILABILITY,
        headers=bearer("manager_a"),
        json={
            "weekly": {"saturday": {"start": "10:00", "end": "12:00"}},
            "slot_minutes": 60,
            "closed_dates": ["2026-04-02"],
            "overrides": {"2026-04-03": {"start": "09:00", "end": "10:00"}},
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["weekly"]["saturday"] == {"start": "10:00", "end": "12:00", "open": True}
    assert body["weekly"]["monday"]["start"] == "09:00"
    assert body["closed_dates"] == ["2026-04-02"]
    assert list(body["overrides"]) == ["2026-04-03"]

    async def slots_on(day: str) -> list[str]:
        r = await client.get(
            f"{AVAILABILITY}/slots", params={"date": day}, headers=bearer("staff_a")
        )
        assert r.status_code == 200
        return r.json()["available_slots"]

    assert await slots_on("2026-04-04") == ["10:00", "11:00"]
    assert await slots_on("2026-04-02") == []
    assert await slots_on("2026-04-03") == ["09:00"]


@pytest.mark.parametrize(
    ("actor", "body", "status"),
    [
        ("citizen", {"slot_minutes": 15}, 403),
        ("manager_b", {"slot_minutes": 15}, 403),
        ("manager_a", {"slot_minutes": 4}, 422),
        ("manager_a", {"weekly": {"monday": {"start": "25:00", "end": "26:00"}}}, 422),
        ("manager_a", {"weekly": {"monday": {"start": "12:00", "end": "08:00"}}}, 400),
        ("manager_a", {"weekly": {"funday": {"start": "09:00", "end": "10:00"}}}, 400),
    ],
)
async def test_availability_update_rejections(
    client: AsyncClient, bearer, portal, actor, body, status
) -> None:
    response = await client.put(AVAILABILITY, headers=bearer(actor), json=body)
    assert response.status_code == status
    assert portal.store.availability == {}


async def test_unknown_office_availability_is_404(client: AsyncClient, bearer, portal) -> None:
    response = await client.get("/api/v1/offices/missing/availability", headers=bearer("admin"))
    assert response.status_code == 404


async def _submit(client: AsyncClient, bearer) -> str:
    response = await client.post(
        "/api/v1/requests",
        headers=bearer("citizen"),
        json={
            "service_id": "svc_a",
            "current_address": "Bole, Addis Ababa",
            "date": "2026-04-02T09:00:00Z",
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


async def test_feedback_flow(client: AsyncClient, bearer, portal) -> None:
    request_id = await _submit(client, bearer)
    url = f"/api/v1/requests/{request_id}/feedback"

    response = await client.get(url, headers=bearer("citizen"))
    assert response.status_code == 200
    assert response.json() is None

    response = await client.put(
        url, headers=bearer("citizen"), json={"rating": 5, "comment": "Very quick"}
    )
    assert response.status_code == 200
    assert response.json()["rating"] == 5
    assert response.json()["request_id"] == request_id

    response = await client.put(url, headers=bearer("citizen"), json={"rating": 3})
    assert response.status_code == 200
    assert response.json()["comment"] is None

    response = await client.get(url, headers=bearer("staff_a"))
    assert response.status_code == 200
    assert response.json()["rating"] == 3


@pytest.mark.parametrize(
    ("actor", "body", "status"),
    [
        ("citizen", {"rating": 6}, 422),
        ("citizen", {"rating": 0}, 422),
        ("citizen", {}, 422),
        ("citizen2", {"rating": 4}, 403),
    ],
)
async def test_feedback_rejections(
    client: AsyncClient, bearer, portal, actor, body, status
) -> None:
    request_id = await _submit(client, bearer)
    response = await client.put(
        f"/api/v1/requests/{request_id}/feedback", headers=bearer(actor), json=body
    )
    assert response.status_code == status
    assert portal.store.feedback == {}


async def test_feedback_on_unknown_request_is_404(client: AsyncClient, bearer, portal) -> None:
    response = await client.put(
        "/api/v1/requests/missing/feedback", headers=bearer("citizen"), json={"rating": 4}
    )
    assert response.status_code == 404
