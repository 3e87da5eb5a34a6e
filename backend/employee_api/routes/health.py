"""
Employee Manager API — Health Check Route
==========================================

What:  Health check endpoint for container and load balancer probes.
How:   Runs SELECT 1 against the pool and reports the result.

    Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from employee_api import __version__
from employee_api.schemas.employee import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Check the service and its database.

    The check is deliberately a single SELECT 1: probes run every few
    seconds and must stay cheap.
    """
    db_ok = await request.app.state.database.ping()
    if not db_ok:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
