"""Reads backing the office/staff scoping index."""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.entities.actor import ActorProfile
from portal.domain.enums import RoleKind
from portal.infrastructure.persistence.models.appointment import Appointment
from portal.infrastructure.persistence.models.request import ServiceRequest
from portal.infrastructure.persistence.models.role import Role
from portal.infrastructure.persistence.models.service import Service, ServiceStaffAssignment
from portal.infrastructure.persistence.models.staff import Staff
from portal.infrastructure.persistence.models.user import User


class ScopeRepository:
    """Office ownership lookups. A user's office is their earliest staff membership."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_actor_profile(self, user_id: str) -> ActorProfile | None:
        row = (
            await self.db.execute(
                select(User.id, User.role_id, Role.kind)
                .outerjoin(Role, Role.id == User.role_id)
                .where(User.id == user_id)
            )
        ).first()
        if row is None:
            return None
        membership = (
            await self.db.execute(
                select(Staff.id, Staff.office_id)
                .where(Staff.user_id == user_id)
                .order_by(Staff.created_at, Staff.id)
                .limit(1)
            )
        ).first()
        return ActorProfile(
            user_id=row.id,
            role_kind=RoleKind(row.kind) if row.kind else None,
            staff_id=membership.id if membership else None,
            office_id=membership.office_id if membership else None,
            role_id=row.role_id,
        )

    async def get_service_office_id(self, service_id: str) -> str | None:
        result = await self.db.execute(
            select(Service.office_id).where(Service.id == service_id)
        )
        return result.scalar_one_or_none()

    async def get_request_office_id(self, request_id: str) -> str | None:
        result = await self.db.execute(
            select(Service.office_id)
            .join(ServiceRequest, ServiceRequest.service_id == Service.id)
            .where(ServiceRequest.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_appointment_office_id(self, appointment_id: str) -> str | None:
        result = await self.db.execute(
            select(Service.office_id)
            .join(ServiceRequest, ServiceRequest.service_id == Service.id)
            .join(Appointment, Appointment.request_id == ServiceRequest.id)
            .where(Appointment.id == appointment_id)
        )
        return result.scalar_one_or_none()

    async def is_staff_assigned(self, service_id: str, staff_id: str) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    ServiceStaffAssignment.service_id == service_id,
                    ServiceStaffAssignment.staff_id == staff_id,
                )
            )
        )
        return bool(result.scalar())
