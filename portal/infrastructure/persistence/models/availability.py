"""Office availability ORM model.

One row per office. Schedules and closures are stored as JSONB in the shape
the API returns them; an office without a row uses the default schedule.
"""

from typing import Any

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class OfficeAvailability(PortalModel, Base):
    """Opening hours, closures and slot length of an office. Table: office_availability."""

    __tablename__ = "office_availability"

    office_id: Mapped[str] = mapped_column(
        String, ForeignKey("office.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    # {"monday": {"start": "09:00", "end": "17:00", "open": true}, ...}
    weekly_schedule: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    slot_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("30")
    )
    closed_ranges: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    closed_dates: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    date_overrides: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb")
    )

    __table_args__ = (
        CheckConstraint("slot_minutes BETWEEN 5 AND 480", name="ck_availability_slot_minutes"),
    )
