"""Appointment ORM model.

A partial unique index allows at most one active (not rejected, not
cancelled) appointment per request.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class Appointment(PortalModel, Base):
    """Appointment for a fully approved request. Table: appointment."""

    __tablename__ = "appointment"

    request_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("service_request.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    staff_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'pending'")
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'cancelled', 'completed')",
            name="ck_appointment_status",
        ),
        Index(
            "uq_appointment_active_per_request",
            "request_id",
            unique=True,
            postgresql_where=text("status NOT IN ('rejected', 'cancelled')"),
        ),
    )
