"""Office ORM model. Offices own services and staff."""

from sqlalchemy import CheckConstraint, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class Office(PortalModel, Base):
    """Office. Table: office. Inactive offices are hidden from public discovery."""

    __tablename__ = "office"

    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'active'")
    )

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="ck_office_status"),
    )
