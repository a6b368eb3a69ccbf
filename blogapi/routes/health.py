"""
Blog API — Health Check Route
===============================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the database with `SELECT 1` and reports uptime.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (still HTTP 200 so the body is readable)
"""

import logging
import time

from fastapi import APIRouter, Request

from blogapi import __version__
from blogapi.schemas.blog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database = request.app.state.database
    connected = await database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - request.app.state.started_at, 2),
    )
