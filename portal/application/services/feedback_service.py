"""Customer feedback: one rating and comment per request, left by its requester."""

from __future__ import annotations

import logging

from portal.application.dtos.feedback import RATING_MAX, RATING_MIN, FeedbackResult
from portal.application.dtos.request import RequestResult
from portal.application.interfaces.repositories import IFeedbackRepository, IRequestRepository
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.scoping_service import ScopingService
from portal.domain.exceptions import ResourceNotFoundException, ValidationException
from portal.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        request_repo: IRequestRepository,
        feedback_repo: IFeedbackRepository,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.request_repo = request_repo
        self.feedback_repo = feedback_repo

    async def _load_request(self, request_id: str) -> RequestResult:
        request = await self.request_repo.get_by_id(request_id)
        if request is None:
            raise ResourceNotFoundException("request", request_id)
        return request

    async def get_feedback(self, actor_id: str, request_id: str) -> FeedbackResult | None:
        """The requester, admins and the request's office may read; None if not rated yet."""
        await self.guard.require(actor_id, "feedback:read")
        request = await self._load_request(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        if not self.scoping.in_office(actor, request.office_id):
            self.scoping.require_owner(actor, request.user_id)
        return await self.feedback_repo.get_for_request(request_id)

    @traced("feedback.submit")
    async def submit_feedback(
        self, actor_id: str, request_id: str, rating: int, comment: str | None = None
    ) -> FeedbackResult:
        """Rate an own request; submitting again replaces the earlier rating.

        Raises:
            ValidationException: rating outside 1-5.
        """
        await self.guard.require(actor_id, "feedback:create")
        request = await self._load_request(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_owner(actor, request.user_id)
        if not RATING_MIN <= rating <= RATING_MAX:
            raise ValidationException(
                f"Rating must be between {RATING_MIN} and {RATING_MAX}", field="rating"
            )
        text = comment.strip() if comment else None
        feedback = await self.feedback_repo.upsert(request_id, rating, text or None)
        logger.info("Feedback on request %s rated %d by %s", request_id, rating, actor_id)
        return feedback
