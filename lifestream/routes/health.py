"""
LifeStream Backend: Liveness and Health Routes
================================================

What:  GET / answers with a fixed string (liveness). GET /health pings the
       document store and reports connectivity and uptime.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from lifestream import __version__
from lifestream.database import Database, get_database
from lifestream.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()

LIVENESS_MESSAGE = "Life Stream is running"


@router.get("/", response_class=PlainTextResponse, summary="Liveness")
async def root() -> str:
    return LIVENESS_MESSAGE


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
)
async def health_check(
    response: Response,
    db: Database = Depends(get_database),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await db.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
