"""Health, readiness, and liveness endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.api.dependencies import AppSettings, DbSession, Gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Process and store status."""

    status: str
    timestamp: datetime
    database: str
    gateway: str
    timezone: str
    version: str


class ReadinessResponse(BaseModel):
    ready: bool
    checks: dict[str, bool]


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession, settings: AppSettings, gateway: Gateway) -> HealthResponse:
    """Report database reachability and the active payroll configuration."""
    database_ok = await _database_reachable(db)
    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        database="healthy" if database_ok else "unhealthy",
        gateway=gateway.gateway_name,
        timezone=settings.timezone,
        version=settings.engine_version,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    db: DbSession,
    settings: AppSettings,
    response: Response,
) -> ReadinessResponse:
    """Ready once the store answers and a real gateway has its credentials."""
    checks = {
        "database": await _database_reachable(db),
        "gateway": settings.gateway != "paymongo" or bool(settings.paymongo_secret_key),
    }
    ready = all(checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(ready=ready, checks=checks)


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
