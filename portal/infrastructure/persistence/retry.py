"""Bounded retry with exponential backoff for read-only database calls.

Only reads are retried: a state-changing write is never replayed, since the
first attempt may already have been applied.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.exceptions import DependencyException

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(exc: Exception) -> bool:
    """Return True for connection-level failures worth another attempt."""
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)


async def retry_read(
    session: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    backoff_seconds: float = 0.05,
    description: str = "read",
) -> T:
    """Run a read operation, retrying transient connection errors.

    The session is rolled back between attempts so the next try starts on a
    fresh connection. After the last attempt a DependencyException is raised.
    """
    delay = backoff_seconds
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except DBAPIError as exc:
            if not is_transient(exc):
                raise
            await session.rollback()
            if attempt == attempts:
                logger.error(
                    "Database %s failed after %d attempts: %s", description, attempts, exc
                )
                raise DependencyException(
                    "database", f"Database unavailable during {description}"
                ) from exc
            logger.warning(
                "Transient database error during %s (attempt %d/%d): %s",
                description,
                attempt,
                attempts,
                exc,
            )
            await asyncio.sleep(delay)
            delay *= 2
    raise AssertionError("unreachable")
