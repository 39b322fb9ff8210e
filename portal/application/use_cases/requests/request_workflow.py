"""Service request workflow: submit, read, edit, and the two approval tracks.

Every decision is permission first, then office scope, then a single
conditional UPDATE in the repository. Whoever loses a race gets a conflict;
nothing is decided from a value read earlier in the handler. Notifications
are recorded in the outbox inside the same transaction.
"""

from __future__ import annotations

import logging

from portal.application.dtos.request import (
    RequestChanges,
    RequestCreate,
    RequestFilter,
    RequestResult,
)
from portal.application.interfaces.repositories import (
    INotificationOutbox,
    IRequestRepository,
    IServiceRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.notification_messages import request_decision_message
from portal.application.services.scoping_service import ScopingService
from portal.domain.entities.actor import ActorProfile
from portal.domain.enums import ApprovalStatus, ApprovalTrack, DecisionAction, DenialReason
from portal.domain.exceptions import (
    AlreadyProcessedException,
    AuthorizationException,
    RequestNotEditableException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.domain.permissions import WorkflowPermission
from portal.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


class RequestWorkflow:
    """Request use cases for requesters, office staff, managers and admins."""

    def __init__(
        self,
        guard: AuthorizationService,
        scoping: ScopingService,
        request_repo: IRequestRepository,
        service_repo: IServiceRepository,
        outbox: INotificationOutbox,
    ) -> None:
        self.guard = guard
        self.scoping = scoping
        self.request_repo = request_repo
        self.service_repo = service_repo
        self.outbox = outbox

    async def _load(self, request_id: str) -> RequestResult:
        request = await self.request_repo.get_by_id(request_id)
        if request is None:
            raise ResourceNotFoundException("request", request_id)
        return request

    async def _require_service(self, service_id: str) -> None:
        if await self.service_repo.get_by_id(service_id) is None:
            raise ValidationException("Service not found", field="service_id")

    @traced("request.create")
    async def create(self, actor_id: str, data: RequestCreate) -> RequestResult:
        """Submit a request owned by the actor; both tracks start pending."""
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_CREATE)
        await self._require_service(data.service_id)
        created = await self.request_repo.create_request(actor_id, data)
        logger.info("Request %s created by %s for service %s", created.id, actor_id, data.service_id)
        return created

    async def get(self, actor_id: str, request_id: str) -> RequestResult:
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_READ)
        request = await self._load(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        if not await self.scoping.can_read_request(actor, request):
            raise AuthorizationException(
                message="Forbidden: request is outside your scope",
                reason=DenialReason.OUT_OF_SCOPE.value,
                scope="request",
            )
        return request

    async def list_requests(self, actor_id: str, filters: RequestFilter) -> list[RequestResult]:
        """List requests visible to the actor; caller-supplied scope filters are admin-only."""
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_READ)
        actor = await self.scoping.actor_profile(actor_id)
        return await self.request_repo.list_requests(self._scoped_filter(actor, filters))

    @staticmethod
    def _scoped_filter(actor: ActorProfile, filters: RequestFilter) -> RequestFilter:
        if actor.is_admin:
            return filters
        base = {"status": filters.status, "skip": filters.skip, "limit": filters.limit}
        if actor.is_manager and actor.office_id is not None:
            return RequestFilter(office_id=actor.office_id, **base)
        if actor.is_staff and actor.staff_id is not None:
            return RequestFilter(assigned_staff_id=actor.staff_id, **base)
        return RequestFilter(user_id=actor.user_id, **base)

    @traced("request.update")
    async def update(
        self, actor_id: str, request_id: str, changes: RequestChanges
    ) -> RequestResult:
        """Requester edit, allowed only while both tracks are still pending."""
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_UPDATE)
        request = await self._load(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_owner(actor, request.user_id)
        values = changes.as_values()
        if changes.service_id is not None:
            await self._require_service(changes.service_id)
        if not values:
            if not request.tracks.is_editable_by_requester:
                raise RequestNotEditableException(request_id)
            return request
        updated = await self.request_repo.update_if_editable(request_id, values)
        if updated is None:
            raise RequestNotEditableException(request_id)
        logger.info("Request %s edited by requester %s", request_id, actor_id)
        return updated

    @traced("request.delete")
    async def delete(self, actor_id: str, request_id: str) -> None:
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_DELETE)
        request = await self._load(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_owner(actor, request.user_id)
        if not await self.request_repo.delete_if_editable(request_id):
            raise RequestNotEditableException(request_id)
        logger.info("Request %s deleted by requester %s", request_id, actor_id)

    @traced("request.set_note")
    async def set_note(self, actor_id: str, request_id: str, note: str | None) -> RequestResult:
        """Admin-only edit of the approval note."""
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_UPDATE)
        actor = await self.scoping.actor_profile(actor_id)
        if not actor.is_admin:
            raise AuthorizationException(
                message="Forbidden: only an admin may edit the approval note",
                reason=DenialReason.OUT_OF_SCOPE.value,
                scope="admin",
            )
        updated = await self.request_repo.set_note(request_id, note)
        if updated is None:
            raise ResourceNotFoundException("request", request_id)
        return updated

    @traced("request.decide_staff")
    async def decide_as_staff(
        self,
        actor_id: str,
        request_id: str,
        action: DecisionAction,
        note: str | None = None,
    ) -> RequestResult:
        """Approve or reject the staff track.

        Raises:
            AuthorizationException: Missing permission, other office, or not assigned.
            AlreadyProcessedException: The track is already in the requested state.
        """
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_APPROVE_STAFF)
        request = await self._load(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, request.office_id)
        await self.scoping.require_service_assignment(actor, request.service_id)

        decided = await self.request_repo.decide_staff_track(
            request_id, action, actor.staff_id, note
        )
        if decided is None:
            raise AlreadyProcessedException(
                request_id, "staff", "processed" if action == DecisionAction.APPROVE else "rejected"
            )
        add_span_attributes(**{"request.combined_status": decided.combined_status.value})
        logger.info(
            "Request %s staff track %s by %s (combined=%s)",
            request_id,
            decided.status_by_staff.value,
            actor_id,
            decided.combined_status.value,
        )
        await self._notify(decided, ApprovalTrack.STAFF)
        return decided

    @traced("request.decide_manager")
    async def decide_as_manager(
        self,
        actor_id: str,
        request_id: str,
        action: DecisionAction,
        note: str | None = None,
    ) -> RequestResult:
        """Approve or reject the manager track (same office; no service assignment needed)."""
        await self.guard.require(actor_id, WorkflowPermission.REQUEST_APPROVE_MANAGER)
        request = await self._load(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        self.scoping.require_office_scope(actor, request.office_id)

        decided = await self.request_repo.decide_manager_track(
            request_id, action, actor.staff_id, note
        )
        if decided is None:
            raise AlreadyProcessedException(
                request_id,
                "manager",
                "processed" if action == DecisionAction.APPROVE else "rejected",
            )
        add_span_attributes(**{"request.combined_status": decided.combined_status.value})
        logger.info(
            "Request %s manager track %s by %s (combined=%s)",
            request_id,
            decided.status_by_manager.value,
            actor_id,
            decided.combined_status.value,
        )
        await self._notify(decided, ApprovalTrack.MANAGER)
        return decided

    async def can_approve_as_staff(self, actor_id: str, request_id: str) -> bool:
        """Whether a staff decision by the actor would currently be accepted."""
        decision = await self.guard.check(actor_id, WorkflowPermission.REQUEST_APPROVE_STAFF)
        if not decision.allowed:
            return False
        request = await self._load(request_id)
        actor = await self.scoping.actor_profile(actor_id)
        if not self.scoping.in_office(actor, request.office_id):
            return False
        if not actor.is_admin and not await self.scoping.is_assigned(actor, request.service_id):
            return False
        return request.status_by_staff != ApprovalStatus.APPROVED

    async def _notify(self, request: RequestResult, track: ApprovalTrack) -> None:
        message = request_decision_message(request, track)
        if message is None:
            return
        if not request.requester_phone:
            logger.warning("Request %s has no requester phone; notification skipped", request.id)
            return
        topic, text = message
        await self.outbox.enqueue(request.requester_phone, text, topic)
