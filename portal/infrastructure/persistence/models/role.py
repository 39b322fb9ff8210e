"""Role ORM model. Platform-wide (office_id NULL) or owned by one office."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class Role(PortalModel, Base):
    """Role. Table: role. Name unique (case-insensitive) within its office or the platform."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    office_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("office.id", ondelete="CASCADE"), nullable=True, index=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "kind IN ('admin', 'manager', 'staff', 'customer', 'custom')",
            name="ck_role_kind",
        ),
    )


Index(
    "uq_role_name_office",
    func.lower(Role.name),
    func.coalesce(Role.office_id, ""),
    unique=True,
)
