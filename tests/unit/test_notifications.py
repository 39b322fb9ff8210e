"""Outbox relay, SMS dispatchers and notification texts."""

import asyncio
import json
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import httpx
import pytest

from portal.application.dtos.appointment import AppointmentResult
from portal.application.services.notification_messages import (
    TOPIC_REQUEST_APPROVED,
    TOPIC_REQUEST_AWAITING_MANAGER,
    TOPIC_REQUEST_REJECTED,
    appointment_status_message,
    request_decision_message,
)
from portal.core.config import Settings
from portal.domain.entities import combine_tracks
from portal.domain.enums import AppointmentStatus, ApprovalStatus, ApprovalTrack
from portal.domain.exceptions import DependencyException
from portal.infrastructure.external.sms import HttpSmsDispatcher, LogOnlyNotificationDispatcher
from portal.infrastructure.messaging import PollingOutboxSignal
from portal.infrastructure.services.notification_relay import NotificationRelay


class MemoryOutboxStore:
    def __init__(self, rows: list[dict]) -> None:
        self.rows = rows

    async def claim_pending(self, limit: int) -> list[tuple[str, str, str, int]]:
        pending = [r for r in self.rows if r["status"] == "pending"][:limit]
        return [(r["id"], r["destination"], r["message"], r["attempts"]) for r in pending]

    async def mark_sent(self, notification_id: str, sent_at: datetime) -> None:
        row = self._row(notification_id)
        row["status"] = "sent"
        row["sent_at"] = sent_at

    async def mark_attempt_failed(self, notification_id: str, error: str, give_up: bool) -> None:
        row = self._row(notification_id)
        row["attempts"] += 1
        row["last_error"] = error
        if give_up:
            row["status"] = "failed"

    def _row(self, notification_id: str) -> dict:
        return next(r for r in self.rows if r["id"] == notification_id)


class RecordingDispatcher:
    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.sent: list[tuple[str, str]] = []

    async def send(self, destination: str, message: str) -> dict:
        if destination in self.failing:
            raise DependencyException("sms", "gateway down")
        self.sent.append((destination, message))
        return {"status": "ok"}


class EventSignal:
    def __init__(self) -> None:
        self.event = asyncio.Event()

    async def notify(self) -> bool:
        self.event.set()
        return True

    async def wait(self, timeout: float) -> bool:
        try:
            await asyncio.wait_for(self.event.wait(), timeout)
        except TimeoutError:
            return False
        self.event.clear()
        return True


def _row(row_id: str, destination: str, attempts: int = 0) -> dict:
    return {
        "id": row_id,
        "destination": destination,
        "message": f"hello {row_id}",
        "attempts": attempts,
        "status": "pending",
    }


def _relay(rows: list[dict], dispatcher, signal=None, **kwargs) -> NotificationRelay:
    @asynccontextmanager
    async def session_factory():
        yield None

    store = MemoryOutboxStore(rows)
    return NotificationRelay(
        session_factory,
        dispatcher,
        signal or PollingOutboxSignal(),
        store_factory=lambda _session: store,
        **kwargs,
    )


async def test_relay_delivers_pending_rows() -> None:
    rows = [_row("n1", "+251911000001"), _row("n2", "+251911000002")]
    dispatcher = RecordingDispatcher()
    assert await _relay(rows, dispatcher).run_once() == 2
    assert [r["status"] for r in rows] == ["sent", "sent"]
    assert dispatcher.sent[0] == ("+251911000001", "hello n1")


async def test_relay_failure_is_counted_and_retried_later() -> None:
    rows = [_row("n1", "+251911000001"), _row("n2", "+251911000002")]
    dispatcher = RecordingDispatcher(failing={"+251911000001"})
    relay = _relay(rows, dispatcher, max_attempts=3)

    assert await relay.run_once() == 1
    assert rows[0]["status"] == "pending"
    assert rows[0]["attempts"] == 1
    assert rows[0]["last_error"] == "gateway down"

    dispatcher.failing.clear()
    assert await relay.run_once() == 1
    assert rows[0]["status"] == "sent"


async def test_relay_gives_up_at_max_attempts() -> None:
    rows = [_row("n1", "+251911000001", attempts=2)]
    relay = _relay(rows, RecordingDispatcher(failing={"+251911000001"}), max_attempts=3)
    assert await relay.run_once() == 0
    assert rows[0]["status"] == "failed"
    assert await relay.run_once() == 0


async def test_relay_single_attempt_budget_fails_immediately() -> None:
    dispatcher = AsyncMock()
    dispatcher.send = AsyncMock(side_effect=DependencyException("sms", "timeout"))
    rows = [_row("n1", "+251911000001")]
    assert await _relay(rows, dispatcher, max_attempts=1).run_once() == 0
    dispatcher.send.assert_awaited_once_with("+251911000001", "hello n1")
    assert rows[0]["status"] == "failed"
    assert rows[0]["attempts"] == 1


async def test_unexpected_dispatcher_error_only_fails_that_row() -> None:
    rows = [_row(f"n{i}", f"+25191100000{i}") for i in range(3)]
    dispatcher = AsyncMock()
    dispatcher.send = AsyncMock(side_effect=[{"status": "ok"}, RuntimeError("socket closed"), {}])
    relay = _relay(rows, dispatcher, max_attempts=3)

    assert await relay.run_once() == 2
    assert [r["status"] for r in rows] == ["sent", "pending", "sent"]
    assert rows[1]["attempts"] == 1
    assert rows[1]["last_error"] == "RuntimeError: socket closed"


async def test_relay_batch_size_limits_one_pass() -> None:
    rows = [_row(f"n{i}", f"+25191100000{i}") for i in range(3)]
    relay = _relay(rows, RecordingDispatcher(), batch_size=2)
    assert await relay.run_once() == 2
    assert await relay.run_once() == 1


async def test_run_forever_wakes_on_signal_and_stops_on_cancel() -> None:
    rows: list[dict] = []
    signal = EventSignal()
    relay = _relay(rows, RecordingDispatcher(), signal=signal, poll_interval=30.0)
    task = asyncio.create_task(relay.run_forever())
    await asyncio.sleep(0)
    rows.append(_row("n1", "+251911000001"))
    await signal.notify()
    for _ in range(20):
        if rows[0]["status"] == "sent":
            break
        await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert rows[0]["status"] == "sent"


def _settings(**overrides) -> Settings:
    values = {
        "secret_key": "test-secret",
        "sms_api_url": "https://sms.example.test/send",
        "sms_api_token": "tok",
        "sms_identifier_id": "ident-1",
        "sms_sender_name": "Kebele",
    }
    values.update(overrides)
    return Settings(**values)


async def test_http_sms_dispatcher_posts_json_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"acknowledge": "success"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    dispatcher = HttpSmsDispatcher(_settings(), http_client=client)
    ack = await dispatcher.send("+251911000001", "hello")

    assert ack == {"acknowledge": "success"}
    assert seen[0].headers["Authorization"] == "Bearer tok"
    body = json.loads(seen[0].content)
    assert body["to"] == "+251911000001"
    assert body["message"] == "hello"
    assert body["from"] == "ident-1"
    assert body["sender"] == "Kebele"


async def test_http_sms_dispatcher_raises_on_error_status() -> None:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _request: httpx.Response(502, text="bad gateway"))
    )
    dispatcher = HttpSmsDispatcher(_settings(sms_api_token=None), http_client=client)
    with pytest.raises(DependencyException) as exc_info:
        await dispatcher.send("+251911000001", "hello")
    assert "502" in exc_info.value.message
    assert exc_info.value.details == {"dependency": "sms"}


async def test_http_sms_dispatcher_raises_on_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    dispatcher = HttpSmsDispatcher(_settings(), http_client=client)
    with pytest.raises(DependencyException):
        await dispatcher.send("+251911000001", "hello")


def test_http_sms_dispatcher_requires_url() -> None:
    with pytest.raises(ValueError):
        HttpSmsDispatcher(_settings(sms_api_url=None))


async def test_log_only_dispatcher() -> None:
    assert await LogOnlyNotificationDispatcher().send("+251911000001", "hi") == {"status": "logged"}


class _Request:
    def __init__(self, staff: ApprovalStatus, manager: ApprovalStatus, note: str | None = None):
        self.id = "req1"
        self.status_by_staff = staff
        self.status_by_manager = manager
        self.approve_note = note
        self.combined_status = combine_tracks(staff, manager)


def test_request_decision_messages() -> None:
    A, P, R = ApprovalStatus.APPROVED, ApprovalStatus.PENDING, ApprovalStatus.REJECTED
    topic, _ = request_decision_message(_Request(A, A), ApprovalTrack.MANAGER)
    assert topic == TOPIC_REQUEST_APPROVED
    topic, _ = request_decision_message(_Request(A, P), ApprovalTrack.STAFF)
    assert topic == TOPIC_REQUEST_AWAITING_MANAGER
    topic, text = request_decision_message(_Request(P, R, note="Missing ID"), ApprovalTrack.MANAGER)
    assert topic == TOPIC_REQUEST_REJECTED
    assert text.endswith("Note: Missing ID")


def test_appointment_status_message_skips_pending() -> None:
    appointment = AppointmentResult(
        id="ap1",
        request_id="req1",
        user_id="citizen",
        office_id="office_a",
        service_id="svc_a",
        staff_id=None,
        date=datetime(2026, 4, 2, tzinfo=UTC),
        time=None,
        notes=None,
        status=AppointmentStatus.PENDING,
    )
    assert appointment_status_message(appointment) is None
