"""Service request repository.

Every state change is a single conditional UPDATE (or DELETE) with
RETURNING: the WHERE clause carries the precondition, so two concurrent
deciders cannot both succeed. A None result means the precondition no
longer held.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, and_, delete, exists, or_, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.request import RequestCreate, RequestFilter, RequestResult
from portal.domain.enums import ApprovalStatus, CombinedRequestStatus, DecisionAction
from portal.infrastructure.persistence.models.request import ServiceRequest
from portal.infrastructure.persistence.models.service import Service, ServiceStaffAssignment
from portal.infrastructure.persistence.models.user import User
from portal.infrastructure.persistence.repositories.base import BaseRepository

_PENDING = ApprovalStatus.PENDING.value
_APPROVED = ApprovalStatus.APPROVED.value
_REJECTED = ApprovalStatus.REJECTED.value


def _request_to_result(r: ServiceRequest, office_id: str, phone: str | None) -> RequestResult:
    return RequestResult(
        id=r.id,
        user_id=r.user_id,
        service_id=r.service_id,
        office_id=office_id,
        current_address=r.current_address,
        date=r.date,
        status_by_staff=ApprovalStatus(r.status_by_staff),
        status_by_manager=ApprovalStatus(r.status_by_manager),
        approving_staff_id=r.approving_staff_id,
        approving_manager_id=r.approving_manager_id,
        approve_note=r.approve_note,
        requester_phone=phone,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _combined_status_clause(status: CombinedRequestStatus):
    staff = ServiceRequest.status_by_staff
    manager = ServiceRequest.status_by_manager
    if status == CombinedRequestStatus.FULLY_APPROVED:
        return and_(staff == _APPROVED, manager == _APPROVED)
    if status == CombinedRequestStatus.REJECTED:
        return or_(staff == _REJECTED, manager == _REJECTED)
    return and_(
        staff != _REJECTED,
        manager != _REJECTED,
        or_(staff != _APPROVED, manager != _APPROVED),
    )


class RequestRepository(BaseRepository[ServiceRequest]):
    """Requests joined with their service's office and the requester's phone."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ServiceRequest)

    @staticmethod
    def _select() -> Select:
        return (
            select(ServiceRequest, Service.office_id, User.phone_number)
            .join(Service, Service.id == ServiceRequest.service_id)
            .join(User, User.id == ServiceRequest.user_id)
            .execution_options(populate_existing=True)
        )

    async def _one(self, stmt: Select) -> RequestResult | None:
        row = (await self.db.execute(stmt)).first()
        return _request_to_result(*row) if row else None

    async def get_by_id(self, request_id: str) -> RequestResult | None:
        return await self._one(self._select().where(ServiceRequest.id == request_id))

    async def get_for_update(self, request_id: str) -> RequestResult | None:
        """Lock the request row until the surrounding transaction ends."""
        return await self._one(
            self._select()
            .where(ServiceRequest.id == request_id)
            .with_for_update(of=ServiceRequest)
        )

    async def create_request(self, user_id: str, data: RequestCreate) -> RequestResult:
        created = await self._add(
            ServiceRequest(
                user_id=user_id,
                service_id=data.service_id,
                current_address=data.current_address,
                date=data.date,
                status_by_staff=_PENDING,
                status_by_manager=_PENDING,
            )
        )
        result = await self.get_by_id(created.id)
        if result is None:
            raise RuntimeError(f"Request {created.id} vanished after insert")
        return result

    async def list_requests(self, filters: RequestFilter) -> list[RequestResult]:
        stmt = self._select()
        if filters.user_id is not None:
            stmt = stmt.where(ServiceRequest.user_id == filters.user_id)
        if filters.office_id is not None:
            stmt = stmt.where(Service.office_id == filters.office_id)
        if filters.assigned_staff_id is not None:
            stmt = stmt.where(
                exists().where(
                    ServiceStaffAssignment.service_id == ServiceRequest.service_id,
                    ServiceStaffAssignment.staff_id == filters.assigned_staff_id,
                )
            )
        if filters.status is not None:
            stmt = stmt.where(_combined_status_clause(filters.status))
        stmt = (
            stmt.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id)
            .offset(filters.skip)
            .limit(filters.limit)
        )
        result = await self.db.execute(stmt)
        return [_request_to_result(*row) for row in result.all()]

    async def _conditional_update(
        self, request_id: str, condition: Any, values: dict[str, Any]
    ) -> RequestResult | None:
        result = await self.db.execute(
            update(ServiceRequest)
            .where(ServiceRequest.id == request_id, condition)
            .values(**values)
            .returning(ServiceRequest.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            return None
        return await self.get_by_id(request_id)

    def _editable(self):
        return and_(
            ServiceRequest.status_by_staff == _PENDING,
            ServiceRequest.status_by_manager == _PENDING,
        )

    async def update_if_editable(
        self, request_id: str, values: dict[str, object]
    ) -> RequestResult | None:
        return await self._conditional_update(request_id, self._editable(), dict(values))

    async def delete_if_editable(self, request_id: str) -> bool:
        result = await self.db.execute(
            delete(ServiceRequest)
            .where(ServiceRequest.id == request_id, self._editable())
            .returning(ServiceRequest.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    async def _decide(
        self,
        request_id: str,
        status_column: Any,
        approver_column: str,
        action: DecisionAction,
        staff_id: str | None,
        note: str | None,
    ) -> RequestResult | None:
        if action == DecisionAction.APPROVE:
            target, approver = _APPROVED, staff_id
        else:
            target, approver = _REJECTED, None
        values: dict[str, Any] = {status_column.key: target, approver_column: approver}
        if note is not None:
            values["approve_note"] = note
        return await self._conditional_update(request_id, status_column != target, values)

    async def decide_staff_track(
        self,
        request_id: str,
        action: DecisionAction,
        staff_id: str | None,
        note: str | None,
    ) -> RequestResult | None:
        return await self._decide(
            request_id,
            ServiceRequest.status_by_staff,
            "approving_staff_id",
            action,
            staff_id,
            note,
        )

    async def decide_manager_track(
        self,
        request_id: str,
        action: DecisionAction,
        staff_id: str | None,
        note: str | None,
    ) -> RequestResult | None:
        return await self._decide(
            request_id,
            ServiceRequest.status_by_manager,
            "approving_manager_id",
            action,
            staff_id,
            note,
        )

    async def set_note(self, request_id: str, note: str | None) -> RequestResult | None:
        return await self._conditional_update(
            request_id, true(), {"approve_note": note}
        )
