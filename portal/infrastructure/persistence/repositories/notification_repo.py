"""Notification outbox repository: enqueue (workflow side) and claim/ack (relay side)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.enums import NotificationStatus
from portal.infrastructure.persistence.models.notification import NotificationOutbox

_LAST_ERROR_MAX = 1000
# Set on the session by enqueue; read after commit to wake the relay.
OUTBOX_PENDING_KEY = "outbox_pending"


class NotificationOutboxRepository:
    """Outbox rows live and die with the transaction of the session passed in."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def enqueue(self, destination: str, message: str, topic: str) -> None:
        self.db.add(
            NotificationOutbox(
                destination=destination,
                message=message,
                topic=topic,
                status=NotificationStatus.PENDING.value,
                attempts=0,
            )
        )
        self.db.info[OUTBOX_PENDING_KEY] = True
        await self.db.flush()

    async def claim_pending(self, limit: int) -> list[tuple[str, str, str, int]]:
        """Lock up to limit pending rows, skipping rows another relay holds."""
        result = await self.db.execute(
            select(
                NotificationOutbox.id,
                NotificationOutbox.destination,
                NotificationOutbox.message,
                NotificationOutbox.attempts,
            )
            .where(NotificationOutbox.status == NotificationStatus.PENDING.value)
            .order_by(NotificationOutbox.created_at, NotificationOutbox.id)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        return [(r.id, r.destination, r.message, r.attempts) for r in result.all()]

    async def mark_sent(self, notification_id: str, sent_at: datetime) -> None:
        await self.db.execute(
            update(NotificationOutbox)
            .where(NotificationOutbox.id == notification_id)
            .values(status=NotificationStatus.SENT.value, sent_at=sent_at, last_error=None)
            .execution_options(synchronize_session=False)
        )

    async def mark_attempt_failed(
        self, notification_id: str, error: str, give_up: bool
    ) -> None:
        status = NotificationStatus.FAILED if give_up else NotificationStatus.PENDING
        await self.db.execute(
            update(NotificationOutbox)
            .where(NotificationOutbox.id == notification_id)
            .values(
                status=status.value,
                attempts=NotificationOutbox.attempts + 1,
                last_error=error[:_LAST_ERROR_MAX],
            )
            .execution_options(synchronize_session=False)
        )
