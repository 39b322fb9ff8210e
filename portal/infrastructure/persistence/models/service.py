"""Service and service-staff assignment ORM models."""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class Service(PortalModel, Base):
    """Service offered by exactly one office. Table: service."""

    __tablename__ = "service"

    office_id: Mapped[str] = mapped_column(
        String, ForeignKey("office.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class ServiceStaffAssignment(PortalModel, Base):
    """Staff member allowed to decide requests for a service. Unique (service_id, staff_id)."""

    __tablename__ = "service_staff_assignment"

    service_id: Mapped[str] = mapped_column(
        String, ForeignKey("service.id", ondelete="CASCADE"), nullable=False, index=True
    )
    staff_id: Mapped[str] = mapped_column(
        String, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("service_id", "staff_id", name="uq_service_staff"),
    )
