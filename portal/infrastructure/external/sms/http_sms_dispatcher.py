"""SMS gateway client.

Posts one JSON message per call with a bearer token. All HTTP goes
through a shared httpx.AsyncClient owned by the app lifespan.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from portal.core.config import Settings
from portal.domain.exceptions import DependencyException

logger = logging.getLogger(__name__)

_ERROR_BODY_MAX = 500


class HttpSmsDispatcher:
    """Deliver messages through the configured SMS HTTP API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        if not settings.sms_api_url:
            raise ValueError("SMS_API_URL is required for HttpSmsDispatcher")
        self.url = settings.sms_api_url
        self.token = settings.sms_api_token.get_secret_value() if settings.sms_api_token else None
        self.sender = settings.sms_sender_name
        self.identifier_id = settings.sms_identifier_id
        self.callback_url = settings.sms_callback_url
        self.http_client = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(timeout=settings.sms_timeout_seconds)
        )

    def _payload(self, destination: str, message: str) -> dict[str, Any]:
        return {
            "from": self.identifier_id,
            "sender": self.sender,
            "to": destination,
            "message": message,
            "callback": self.callback_url,
        }

    async def send(self, destination: str, message: str) -> dict[str, Any]:
        """POST the message to the gateway.

        Raises:
            DependencyException: Transport error or non-2xx response.
        """
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = await self.http_client.post(
                self.url, headers=headers, json=self._payload(destination, message)
            )
        except httpx.HTTPError as e:
            logger.warning("SMS gateway unreachable: %s", e)
            raise DependencyException("sms", f"SMS gateway unreachable: {e}") from e
        if resp.status_code < 200 or resp.status_code >= 300:
            body = resp.text[:_ERROR_BODY_MAX]
            logger.warning("SMS gateway returned %s: %s", resp.status_code, body)
            raise DependencyException("sms", f"SMS gateway returned {resp.status_code}: {body}")
        try:
            ack = resp.json() if resp.content else {}
        except ValueError:
            ack = {"raw": resp.text[:_ERROR_BODY_MAX]}
        logger.info("SMS sent to %s", destination)
        return ack if isinstance(ack, dict) else {"result": ack}
