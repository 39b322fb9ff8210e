"""Messaging: Redis pub/sub wake-ups for the notification relay."""

from portal.infrastructure.messaging.outbox_signal import PollingOutboxSignal, RedisOutboxSignal

__all__ = ["PollingOutboxSignal", "RedisOutboxSignal"]
