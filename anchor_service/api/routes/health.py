"""Health & Readiness Checks.

Invariants:
    - GET /health always returns 200 with a constant body if the process is up
    - GET /health/ready returns 503 if the database is unreachable, or if the
      anchors/assets tables are missing (migrations not applied)
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from anchor_service import __version__
from anchor_service.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "anchor-service",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness: the database answers and the anchor schema is in place."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        logger.warning("Readiness check failed: database unavailable")
        return _not_ready("database_unavailable")
    if not await manager.schema_check():
        logger.warning("Readiness check failed: anchor schema missing")
        return _not_ready("schema_missing")
    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "healthy"},
    }


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
