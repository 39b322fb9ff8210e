"""Notification relay: drains the outbox and hands messages to the SMS dispatcher.

Rows are claimed with SKIP LOCKED inside one transaction per batch, so
several relays (one per API worker) never send the same row twice. A
delivery failure, expected or not, is counted on that row alone and retried
on a later pass until max_attempts; rows already sent in the batch stay sent,
and it never reaches the request that produced the message.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.interfaces.repositories import IOutboxStore
from portal.application.interfaces.services import INotificationDispatcher, IOutboxSignal
from portal.domain.exceptions import DependencyException
from portal.infrastructure.persistence.repositories.notification_repo import (
    NotificationOutboxRepository,
)
from portal.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class NotificationRelay:
    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
        dispatcher: INotificationDispatcher,
        signal: IOutboxSignal,
        *,
        batch_size: int = 20,
        max_attempts: int = 5,
        poll_interval: float = 5.0,
        store_factory: Callable[[AsyncSession], IOutboxStore] = NotificationOutboxRepository,
    ) -> None:
        """session_factory must yield a session with an open transaction."""
        self.session_factory = session_factory
        self.dispatcher = dispatcher
        self.signal = signal
        self.batch_size = batch_size
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.store_factory = store_factory

    async def run_once(self) -> int:
        """Process one batch; return how many rows were delivered."""
        delivered = 0
        async with self.session_factory() as session:
            outbox = self.store_factory(session)
            for notification_id, destination, message, attempts in await outbox.claim_pending(
                self.batch_size
            ):
                try:
                    await self.dispatcher.send(destination, message)
                except DependencyException as e:
                    await self._record_failure(outbox, notification_id, attempts, e.message)
                    continue
                except Exception as e:
                    logger.exception("Dispatcher raised unexpectedly for %s", notification_id)
                    await self._record_failure(
                        outbox, notification_id, attempts, f"{type(e).__name__}: {e}"
                    )
                    continue
                await outbox.mark_sent(notification_id, utc_now())
                delivered += 1
        return delivered

    async def _record_failure(
        self, outbox: IOutboxStore, notification_id: str, attempts: int, error: str
    ) -> None:
        give_up = attempts + 1 >= self.max_attempts
        await outbox.mark_attempt_failed(notification_id, error, give_up)
        if give_up:
            logger.error(
                "Notification %s failed after %d attempts: %s",
                notification_id,
                attempts + 1,
                error,
            )
        else:
            logger.warning(
                "Notification %s attempt %d failed: %s", notification_id, attempts + 1, error
            )

    async def run_forever(self) -> None:
        """Loop until cancelled: drain, then wait for a signal or the poll interval."""
        logger.info("Notification relay started")
        try:
            while True:
                try:
                    delivered = await self.run_once()
                except DependencyException as e:
                    logger.warning("Notification relay pass skipped: %s", e.message)
                    delivered = 0
                except Exception:
                    logger.exception("Notification relay pass failed")
                    delivered = 0
                if delivered >= self.batch_size:
                    continue
                await self.signal.wait(self.poll_interval)
        except asyncio.CancelledError:
            logger.info("Notification relay stopped")
            raise
