"""Request context management using contextvars.

Holds the authenticated user id for the current request so log lines and
error handlers can name the actor without threading it through every call.

Usage:
    set_current_user("user123")
    user_id = get_current_actor_id()
"""

from contextvars import ContextVar

_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


def set_current_user(user_id: str) -> None:
    """Set the current user for this request (called after authentication).

    Raises:
        ValueError: If user_id is empty.
    """
    if not user_id:
        raise ValueError("user_id is required")
    _current_user_id.set(user_id)


def clear_current_user() -> None:
    """Clear the current user context."""
    _current_user_id.set(None)


def get_current_actor_id() -> str | None:
    """Return the current user ID, or None if not authenticated."""
    return _current_user_id.get()


_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    return _request_id.get()
