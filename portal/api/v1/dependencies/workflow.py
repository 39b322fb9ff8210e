"""Request workflow, appointment lifecycle and feedback dependencies (composition root)."""

from __future__ import annotations

from portal.application.services import FeedbackService
from portal.application.use_cases import AppointmentLifecycle, RequestWorkflow
from portal.infrastructure.persistence.repositories import (
    AppointmentRepository,
    FeedbackRepository,
    NotificationOutboxRepository,
    RequestRepository,
    ServiceRepository,
    StaffRepository,
)

from .rbac import Guard, ReadSession, Scoping, WriteSession


async def get_request_workflow(db: WriteSession, guard: Guard, scoping: Scoping) -> RequestWorkflow:
    return RequestWorkflow(
        guard=guard,
        scoping=scoping,
        request_repo=RequestRepository(db),
        service_repo=ServiceRepository(db),
        outbox=NotificationOutboxRepository(db),
    )


async def get_request_reader(db: ReadSession, guard: Guard, scoping: Scoping) -> RequestWorkflow:
    """Workflow on the read session for GET endpoints (no transaction held)."""
    return RequestWorkflow(
        guard=guard,
        scoping=scoping,
        request_repo=RequestRepository(db),
        service_repo=ServiceRepository(db),
        outbox=NotificationOutboxRepository(db),
    )


async def get_appointment_lifecycle(
    db: WriteSession, guard: Guard, scoping: Scoping
) -> AppointmentLifecycle:
    return AppointmentLifecycle(
        guard=guard,
        scoping=scoping,
        appointment_repo=AppointmentRepository(db),
        request_repo=RequestRepository(db),
        staff_repo=StaffRepository(db),
        outbox=NotificationOutboxRepository(db),
    )


async def get_appointment_reader(
    db: ReadSession, guard: Guard, scoping: Scoping
) -> AppointmentLifecycle:
    return AppointmentLifecycle(
        guard=guard,
        scoping=scoping,
        appointment_repo=AppointmentRepository(db),
        request_repo=RequestRepository(db),
        staff_repo=StaffRepository(db),
        outbox=NotificationOutboxRepository(db),
    )


async def get_feedback_service(
    db: WriteSession, guard: Guard, scoping: Scoping
) -> FeedbackService:
    return FeedbackService(
        guard=guard,
        scoping=scoping,
        request_repo=RequestRepository(db),
        feedback_repo=FeedbackRepository(db),
    )


async def get_feedback_reader(db: ReadSession, guard: Guard, scoping: Scoping) -> FeedbackService:
    return FeedbackService(
        guard=guard,
        scoping=scoping,
        request_repo=RequestRepository(db),
        feedback_repo=FeedbackRepository(db),
    )
