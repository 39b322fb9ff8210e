"""Staff ORM model: binds a user to the office they act for."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class Staff(PortalModel, Base):
    """Staff membership. Table: staff.

    Multiple memberships per user are not prevented; lookups take the
    earliest (created_at, id).
    """

    __tablename__ = "staff"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    office_id: Mapped[str] = mapped_column(
        String, ForeignKey("office.id", ondelete="CASCADE"), nullable=False, index=True
    )
