"""Service request ORM model with its two approval tracks."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class ServiceRequest(PortalModel, Base):
    """Citizen request for a service. Table: service_request.

    approving_staff_id / approving_manager_id are set only while the
    matching track is approved.
    """

    __tablename__ = "service_request"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_id: Mapped[str] = mapped_column(
        String, ForeignKey("service.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    current_address: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status_by_staff: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'pending'")
    )
    approving_staff_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True
    )
    status_by_manager: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'pending'")
    )
    approving_manager_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True
    )
    approve_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status_by_staff IN ('pending', 'approved', 'rejected')",
            name="ck_request_status_by_staff",
        ),
        CheckConstraint(
            "status_by_manager IN ('pending', 'approved', 'rejected')",
            name="ck_request_status_by_manager",
        ),
    )
