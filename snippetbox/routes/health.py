"""
Snippetbox — Health Check Routes
==================================

What:  Liveness (/ping) and readiness (/health) probes.
How:   /ping answers without touching anything; /health runs SELECT 1
       against the database and reports the result as JSON.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text

from snippetbox import __version__
from snippetbox.database import engine
from snippetbox.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/ping", response_class=PlainTextResponse)
async def ping() -> str:
    return "OK"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check that the service can reach its database.

    Returns:
        HealthResponse; status code 503 when the database is unreachable.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    payload = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=payload.model_dump(),
    )
