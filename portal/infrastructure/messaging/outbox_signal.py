"""Redis pub/sub wake-up channel for the notification relay.

Request handlers publish after their transaction commits; the relay waits
on the channel between polls. When Redis is down both sides degrade to
plain polling, so a lost signal only delays delivery.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import redis.asyncio as redis

from portal.core.config import get_settings

logger = logging.getLogger(__name__)


class _RedisPubSubBase:
    """Shared Redis connection logic."""

    CHANNEL = "portal:notification_outbox"

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize. Pass redis_client for DI/testing."""
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self._connected:
            return
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=(
                        self.settings.redis_password.get_secret_value()
                        if self.settings.redis_password
                        else None
                    ),
                    decode_responses=True,
                    socket_connect_timeout=5,
                )
                await self.redis.ping()
                self._connected = True
                logger.info("Redis outbox signal connected")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis outbox signal connection failed: %s", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.close()
            self._connected = False
            logger.info("Redis outbox signal disconnected")

    def is_available(self) -> bool:
        return self._connected and self.redis is not None


class RedisOutboxSignal(_RedisPubSubBase):
    """notify() from the API side, wait() from the relay."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        super().__init__(redis_client)
        self._pubsub: Any = None

    async def notify(self) -> bool:
        """Publish a wake-up. Returns False if Redis is unavailable."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.publish(self.CHANNEL, "1")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Failed to publish outbox signal: %s", e)
            return False
        return True

    async def wait(self, timeout: float) -> bool:
        """Block up to timeout seconds for a wake-up; True if one arrived."""
        if not self.is_available() or self.redis is None:
            await asyncio.sleep(timeout)
            return False
        try:
            if self._pubsub is None:
                self._pubsub = self.redis.pubsub()
                await self._pubsub.subscribe(self.CHANNEL)
            message = await self._pubsub.get_message(
                ignore_subscribe_messages=True, timeout=timeout
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Outbox signal wait failed, falling back to polling: %s", e)
            self._pubsub = None
            await asyncio.sleep(timeout)
            return False
        return message is not None

    async def disconnect(self) -> None:
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self.CHANNEL)
            await self._pubsub.close()
            self._pubsub = None
        await super().disconnect()


class PollingOutboxSignal:
    """Signal used when Redis is disabled: notify is a no-op, wait just sleeps."""

    async def notify(self) -> bool:
        return False

    async def wait(self, timeout: float) -> bool:
        await asyncio.sleep(timeout)
        return False
