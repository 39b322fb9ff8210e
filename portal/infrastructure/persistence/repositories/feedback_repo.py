"""Customer feedback repository. One row per request, written with an upsert."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from portal.application.dtos.feedback import FeedbackResult
from portal.infrastructure.persistence.models.feedback import CustomerSatisfaction
from portal.infrastructure.persistence.repositories.base import BaseRepository
from portal.shared.utils.generators import generate_cuid

_COLUMNS = (
    CustomerSatisfaction.id,
    CustomerSatisfaction.request_id,
    CustomerSatisfaction.rating,
    CustomerSatisfaction.comment,
    CustomerSatisfaction.created_at,
    CustomerSatisfaction.updated_at,
)


def _row_to_result(row) -> FeedbackResult:
    return FeedbackResult(
        id=row.id,
        request_id=row.request_id,
        rating=row.rating,
        comment=row.comment,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class FeedbackRepository(BaseRepository[CustomerSatisfaction]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CustomerSatisfaction)

    async def get_for_request(self, request_id: str) -> FeedbackResult | None:
        result = await self.db.execute(
            select(*_COLUMNS).where(CustomerSatisfaction.request_id == request_id)
        )
        row = result.first()
        return _row_to_result(row) if row else None

    async def upsert(self, request_id: str, rating: int, comment: str | None) -> FeedbackResult:
        stmt = insert(CustomerSatisfaction).values(
            id=generate_cuid(), request_id=request_id, rating=rating, comment=comment
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CustomerSatisfaction.request_id],
            set_={"rating": rating, "comment": comment, "updated_at": func.now()},
        ).returning(*_COLUMNS)
        result = await self.db.execute(stmt)
        return _row_to_result(result.one())
