"""
MailChimp Sync Backend — Health Check Route
=============================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (SELECT 1) and the MailChimp API (GET ping).
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   Database and MailChimp reachable
    - degraded:  Database reachable, MailChimp not (reads still work,
                 every write is refused with the provider's error)
    - unhealthy: Database unreachable
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse
from app.services.mailchimp_client import get_remote_client
from app.services.remote_base import RemoteClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the status of the backend and of its two dependencies.",
)
async def health_check(remote: RemoteClient = Depends(get_remote_client)) -> HealthResponse:
    db_status = "connected"
    mailchimp_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check MailChimp API ───────────────────────────────────────────────
    if not await remote.ping():
        mailchimp_status = "unavailable"
        overall = "degraded" if overall != "unhealthy" else overall

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        mailchimp=mailchimp_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
