"""Appointment repository.

Edits, deletes and status changes are conditional statements on the
current status; None (or False) means the appointment was not in an
allowed status at the moment of the write.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from sqlalchemy import Select, delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.appointment import (
    AppointmentCreate,
    AppointmentFilter,
    AppointmentResult,
)
from portal.domain.enums import AppointmentStatus
from portal.domain.exceptions import ActiveAppointmentExistsException
from portal.infrastructure.persistence.models.appointment import Appointment
from portal.infrastructure.persistence.models.request import ServiceRequest
from portal.infrastructure.persistence.models.service import Service
from portal.infrastructure.persistence.models.user import User
from portal.infrastructure.persistence.repositories.base import BaseRepository

ACTIVE_APPOINTMENT_INDEX = "uq_appointment_active_per_request"


def _appointment_to_result(
    a: Appointment, service_id: str, office_id: str, phone: str | None
) -> AppointmentResult:
    return AppointmentResult(
        id=a.id,
        request_id=a.request_id,
        user_id=a.user_id,
        office_id=office_id,
        service_id=service_id,
        staff_id=a.staff_id,
        date=a.date,
        time=a.time,
        notes=a.notes,
        status=AppointmentStatus(a.status),
        requester_phone=phone,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


def _values(statuses: frozenset[AppointmentStatus]) -> list[str]:
    return sorted(s.value for s in statuses)


class AppointmentRepository(BaseRepository[Appointment]):
    """Appointments joined with their request's service, office and requester phone."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Appointment)

    @staticmethod
    def _select() -> Select:
        return (
            select(Appointment, ServiceRequest.service_id, Service.office_id, User.phone_number)
            .join(ServiceRequest, ServiceRequest.id == Appointment.request_id)
            .join(Service, Service.id == ServiceRequest.service_id)
            .join(User, User.id == Appointment.user_id)
            .execution_options(populate_existing=True)
        )

    async def get_by_id(self, appointment_id: str) -> AppointmentResult | None:
        row = (await self.db.execute(self._select().where(Appointment.id == appointment_id))).first()
        return _appointment_to_result(*row) if row else None

    async def create_appointment(
        self, user_id: str, staff_id: str | None, data: AppointmentCreate
    ) -> AppointmentResult:
        appointment = Appointment(
            request_id=data.request_id,
            user_id=user_id,
            staff_id=staff_id,
            date=data.date,
            time=data.time,
            notes=data.notes,
            status=AppointmentStatus.PENDING.value,
        )
        try:
            created = await self._add(appointment)
        except IntegrityError as exc:
            if ACTIVE_APPOINTMENT_INDEX in str(exc.orig):
                raise ActiveAppointmentExistsException(data.request_id) from None
            raise
        result = await self.get_by_id(created.id)
        if result is None:
            raise RuntimeError(f"Appointment {created.id} vanished after insert")
        return result

    async def has_active_for_request(self, request_id: str) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    Appointment.request_id == request_id,
                    Appointment.status.not_in(_values(AppointmentStatus.inactive())),
                )
            )
        )
        return bool(result.scalar())

    async def list_appointments(self, filters: AppointmentFilter) -> list[AppointmentResult]:
        stmt = self._select()
        if filters.user_id is not None:
            stmt = stmt.where(Appointment.user_id == filters.user_id)
        if filters.office_id is not None:
            stmt = stmt.where(Service.office_id == filters.office_id)
        if filters.request_id is not None:
            stmt = stmt.where(Appointment.request_id == filters.request_id)
        if filters.status is not None:
            stmt = stmt.where(Appointment.status == filters.status.value)
        stmt = (
            stmt.order_by(Appointment.date.desc(), Appointment.id)
            .offset(filters.skip)
            .limit(filters.limit)
        )
        result = await self.db.execute(stmt)
        return [_appointment_to_result(*row) for row in result.all()]

    async def _conditional_update(
        self, appointment_id: str, condition: Any, values: dict[str, Any]
    ) -> AppointmentResult | None:
        result = await self.db.execute(
            update(Appointment)
            .where(Appointment.id == appointment_id, condition)
            .values(**values)
            .returning(Appointment.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            return None
        return await self.get_by_id(appointment_id)

    def _unlocked(self):
        return Appointment.status.not_in(_values(AppointmentStatus.locked()))

    async def update_if_unlocked(
        self, appointment_id: str, values: dict[str, object]
    ) -> AppointmentResult | None:
        return await self._conditional_update(appointment_id, self._unlocked(), dict(values))

    async def delete_if_unlocked(self, appointment_id: str) -> bool:
        result = await self.db.execute(
            delete(Appointment)
            .where(Appointment.id == appointment_id, self._unlocked())
            .returning(Appointment.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    async def transition(
        self,
        appointment_id: str,
        target: AppointmentStatus,
        allowed_from: frozenset[AppointmentStatus],
        staff_id: str | None = None,
    ) -> AppointmentResult | None:
        if not allowed_from:
            return None
        values: dict[str, Any] = {"status": target.value}
        if staff_id is not None:
            values["staff_id"] = staff_id
        return await self._conditional_update(
            appointment_id, Appointment.status.in_(_values(allowed_from)), values
        )

    async def booked_times(self, office_id: str, day: date) -> list[str]:
        start = datetime.combine(day, time.min, tzinfo=UTC)
        result = await self.db.execute(
            select(Appointment.time)
            .join(ServiceRequest, ServiceRequest.id == Appointment.request_id)
            .join(Service, Service.id == ServiceRequest.service_id)
            .where(
                Service.office_id == office_id,
                Appointment.date >= start,
                Appointment.date < start + timedelta(days=1),
                Appointment.time.is_not(None),
                Appointment.status.not_in(_values(AppointmentStatus.inactive())),
            )
            .order_by(Appointment.time)
        )
        return list(result.scalars().all())
