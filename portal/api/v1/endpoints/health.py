"""Health check endpoints for liveness and readiness checks."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from portal.core.config import get_settings
from portal.infrastructure.persistence.database import get_session_factory
from portal.domain.exceptions import SqlNotConfiguredException
from portal.schemas.health import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database not reachable", "model": ReadinessResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers; 503 when it is missing or down."""
    relay_task = getattr(request.app.state, "notification_relay_task", None)
    if relay_task is None:
        notifications = "disabled"
    elif relay_task.done():
        notifications = "stopped"
    else:
        notifications = "running"

    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except SqlNotConfiguredException:
        body = ReadinessResponse(
            status="not_ready", database="not_configured", notifications=notifications
        )
        return JSONResponse(status_code=503, content=body.model_dump())
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check failed for %s: %s", get_settings().app_name, e)
        body = ReadinessResponse(
            status="not_ready", database="unavailable", notifications=notifications
        )
        return JSONResponse(status_code=503, content=body.model_dump())
    return ReadinessResponse(notifications=notifications)
