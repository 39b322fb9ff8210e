"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import Any, Protocol


class INotificationDispatcher(Protocol):
    """External message delivery (SMS gateway).

    send() raises DependencyException on delivery failure; callers on the
    workflow path never call it directly.
    """

    async def send(self, destination: str, message: str) -> dict[str, Any]:
        """Deliver message; return the gateway acknowledgement."""
        ...


class IOutboxSignal(Protocol):
    """Wake-up channel between request handlers and the notification relay."""

    async def notify(self) -> bool:
        """Signal that new outbox rows were committed. False if unavailable."""
        ...

    async def wait(self, timeout: float) -> bool:
        """Wait for a signal up to timeout seconds. True if one arrived."""
        ...
