"""Simple health and readiness endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fakeshop.api.dependencies.catalog import get_catalog_client
from fakeshop.core.errors import UpstreamUnavailableError
from fakeshop.db.session import engine
from fakeshop.external.fakestore import FakestoreClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "fakeshop-api"
PROBE_TIMEOUT_SECONDS = 3.0


@router.get("/live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """Indicates API process is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/ready", summary="Readiness probe")
async def ready(
    catalog: FakestoreClient = Depends(get_catalog_client),
) -> dict[str, Any]:
    """Check readiness of dependencies (database, external catalog).

    Any HTTP answer from the catalog counts as reachable; only transport
    failures and timeouts mark it unhealthy.
    """
    checks: dict[str, Any] = {
        "status": "ok",
        "service": SERVICE_NAME,
        "checks": {},
    }
    all_healthy = True

    # Check database connectivity
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        checks["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        checks["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
        }
        all_healthy = False

    # Check external catalog reachability
    try:
        status_code = await catalog.ping(timeout=PROBE_TIMEOUT_SECONDS)
        checks["checks"]["external_catalog"] = {
            "status": "healthy",
            "message": f"External catalog responded with HTTP {status_code}",
        }
    except UpstreamUnavailableError as e:
        logger.error(f"External catalog health check failed: {e}")
        checks["checks"]["external_catalog"] = {
            "status": "unhealthy",
            "message": f"External catalog unreachable: {e.message}",
        }
        all_healthy = False

    if not all_healthy:
        checks["status"] = "unhealthy"
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=checks,
        )

    return checks
