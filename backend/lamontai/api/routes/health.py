"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - Cache degradation is reported but never fails readiness (memory fallback serves)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - db_manager read through the module at call time: it is created in the lifespan
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from lamontai.infrastructure import database
from lamontai.infrastructure.cache import get_cache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "lamontai-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — database connectivity plus cache status."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    cache = get_cache()
    cache_ok = await cache.ping()
    checks = {
        "database": "healthy" if db_ok else "unavailable",
        "cache": {
            "backend": cache.backend_name,
            "status": "healthy" if cache_ok else "degraded",
        },
    }
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
                "checks": checks,
            },
        )
    return {"status": "ready", "checks": checks}
