"""FeedbackService: requester-only ratings, one per request, readable by the office."""

from datetime import UTC, datetime

import pytest

from portal.application.dtos.request import RequestCreate
from portal.domain.enums import DenialReason
from portal.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)


async def _request(world):
    return await world.workflow.create(
        "citizen",
        RequestCreate(
            service_id="svc_a", current_address="Kazanchis", date=datetime(2026, 4, 2, tzinfo=UTC)
        ),
    )


async def test_requester_rates_and_rerating_replaces(world) -> None:
    request = await _request(world)
    first = await world.feedback.submit_feedback("citizen", request.id, 5, "  Quick service ")
    assert first.rating == 5
    assert first.comment == "Quick service"

    second = await world.feedback.submit_feedback("citizen", request.id, 2, "   ")
    assert second.id == first.id
    assert second.rating == 2
    assert second.comment is None
    assert len(world.store.feedback) == 1


@pytest.mark.parametrize("rating", [0, 6, -1])
async def test_rating_must_be_one_to_five(world, rating) -> None:
    request = await _request(world)
    with pytest.raises(ValidationException) as exc_info:
        await world.feedback.submit_feedback("citizen", request.id, rating)
    assert exc_info.value.details["field"] == "rating"
    assert world.store.feedback == {}


async def test_only_the_requester_may_rate(world) -> None:
    request = await _request(world)
    with pytest.raises(AuthorizationException) as exc_info:
        await world.feedback.submit_feedback("citizen2", request.id, 4)
    assert exc_info.value.reason == DenialReason.NOT_OWNER.value

    with pytest.raises(AuthorizationException) as exc_info:
        await world.feedback.submit_feedback("staff_a", request.id, 4)
    assert exc_info.value.details["permission"] == "feedback:create"


async def test_rating_unknown_request_is_not_found(world) -> None:
    with pytest.raises(ResourceNotFoundException):
        await world.feedback.submit_feedback("citizen", "missing", 3)


async def test_feedback_readers(world) -> None:
    request = await _request(world)
    assert await world.feedback.get_feedback("citizen", request.id) is None

    await world.feedback.submit_feedback("citizen", request.id, 4, "Fine")
    for reader in ("citizen", "admin", "manager_a", "staff_a_other"):
        assert (await world.feedback.get_feedback(reader, request.id)).rating == 4

    for outsider in ("citizen2", "manager_b"):
        with pytest.raises(AuthorizationException):
            await world.feedback.get_feedback(outsider, request.id)
