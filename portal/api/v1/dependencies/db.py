"""DB session dependencies (composition root).

Reads (guard, scoping) use get_db. Every write in a request shares one
transactional session; once it commits, the relay is woken if the request
recorded notifications.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from portal.infrastructure.persistence.database import get_session_factory
from portal.infrastructure.persistence.repositories.notification_repo import (
    OUTBOX_PENDING_KEY,
)

logger = logging.getLogger(__name__)


async def get_write_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Transactional session: commit on success, roll back on exception."""
    async with get_session_factory()() as session:
        async with session.begin():
            yield session
        if session.info.pop(OUTBOX_PENDING_KEY, False):
            signal = getattr(request.app.state, "outbox_signal", None)
            if signal is not None:
                logger.debug("Outbox rows committed; waking notification relay")
                await signal.notify()
