"""
ShiftLog Relay: Health Check Route
====================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Probes Pinata's testAuthentication endpoint through the app's
       PinningClient and reports an aggregate status.

Status levels:
    - healthy:   Pinata reachable and the JWT accepted
    - degraded:  Pinata unreachable or JWT rejected (uploads will fail with 500)

The endpoint always answers 200 so that the process itself is not restarted
because of a provider outage.
"""

import logging
import time

from fastapi import APIRouter, Request

from shiftrelay import __version__
from shiftrelay.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the relay and the pinning provider.",
)
async def health_check(request: Request) -> HealthResponse:
    pinning_status = "available"
    overall = "healthy"

    client = getattr(request.app.state, "pinning_client", None)
    try:
        if client is None or not await client.health_check():
            pinning_status = "unavailable"
            overall = "degraded"
    except Exception as e:
        pinning_status = "unavailable"
        overall = "degraded"
        logger.warning("Health check: pinning provider probe raised: %s", type(e).__name__)

    return HealthResponse(
        status=overall,
        version=__version__,
        pinning=pinning_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
