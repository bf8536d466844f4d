import time

import structlog
from fastapi import APIRouter, Request

from ...schemas.health import HealthResponse

router = APIRouter()
logger = structlog.get_logger()


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Service health and session snapshot status",
    responses={200: {"description": "Always 200; `degraded` means readings are currently estimated"}},
)
def health(request: Request) -> HealthResponse:
    state = request.app.state
    settings = state.settings
    session = state.session
    latest = session.store.latest()

    estimated = latest.reading.is_estimated if latest is not None else None
    status = "degraded" if estimated else "ok"
    uptime = max(0.0, time.time() - state.start_time)
    logger.debug("health_check", status=status, snapshot=latest.request_id if latest else None)
    return HealthResponse(
        status=status,
        uptime_s=uptime,
        version=settings.app_version,
        app_name=settings.app_name,
        app_env=settings.app_env,
        location=session.location.name,
        last_request_id=session.counter.last_issued,
        snapshot_request_id=latest.request_id if latest is not None else None,
        snapshot_estimated=estimated,
    )
