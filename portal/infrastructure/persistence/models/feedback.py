"""Customer satisfaction ORM model."""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import PortalModel


class CustomerSatisfaction(PortalModel, Base):
    """Rating (1-5) and comment on a request, at most one per request.

    Table: customer_satisfaction.
    """

    __tablename__ = "customer_satisfaction"

    request_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("service_request.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )
