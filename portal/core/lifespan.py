"""Application lifespan: startup and shutdown.

Wiring only: shared HTTP client, outbox signal, notification relay task,
telemetry, and engine dispose. No business logic here.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from portal.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, outbox signal (Redis if enabled),
    notification relay, telemetry. Shutdown runs in reverse, then disposes
    the SQL engine.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.http_client = httpx.AsyncClient(timeout=settings.sms_timeout_seconds)

    from portal.infrastructure.messaging import PollingOutboxSignal, RedisOutboxSignal

    if settings.redis_enabled:
        signal = RedisOutboxSignal()
        await signal.connect()
    else:
        signal = PollingOutboxSignal()
    app.state.outbox_signal = signal

    app.state.notification_relay_task = None
    if settings.notification_relay_enabled and settings.database_url:
        from portal.infrastructure.external.sms import (
            HttpSmsDispatcher,
            LogOnlyNotificationDispatcher,
        )
        from portal.infrastructure.persistence.database import transactional_session
        from portal.infrastructure.services import NotificationRelay

        if settings.sms_api_url:
            dispatcher = HttpSmsDispatcher(settings, http_client=app.state.http_client)
        else:
            logger.info("SMS_API_URL not set; notifications are logged only")
            dispatcher = LogOnlyNotificationDispatcher()
        relay = NotificationRelay(
            transactional_session,
            dispatcher,
            signal,
            batch_size=settings.notification_batch_size,
            max_attempts=settings.notification_max_attempts,
            poll_interval=settings.notification_poll_interval_seconds,
        )
        app.state.notification_relay_task = asyncio.create_task(relay.run_forever())

    if settings.telemetry_enabled:
        from portal.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        from portal.infrastructure.persistence.database import get_engine

        engine = get_engine()
        if engine is not None:
            telemetry.instrument_sqlalchemy(engine)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    from portal.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")

    relay_task = getattr(app.state, "notification_relay_task", None)
    if relay_task is not None:
        relay_task.cancel()
        try:
            await relay_task
        except asyncio.CancelledError:
            pass
        app.state.notification_relay_task = None
        logger.info("Notification relay task stopped")

    signal = getattr(app.state, "outbox_signal", None)
    if isinstance(signal, RedisOutboxSignal):
        await signal.disconnect()
    app.state.outbox_signal = None

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("HTTP client closed")

    from portal.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
