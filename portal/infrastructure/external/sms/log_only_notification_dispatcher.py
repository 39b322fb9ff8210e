"""Dispatcher used when no SMS gateway is configured: messages are only logged."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LogOnlyNotificationDispatcher:
    async def send(self, destination: str, message: str) -> dict[str, Any]:
        logger.info("SMS (log only) to %s: %s", destination, message)
        return {"status": "logged"}
