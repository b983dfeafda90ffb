"""Health check and store statistics endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.models import CommentModel, TagModel, TicketModel
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None


class DatabaseStatsResponse(BaseModel):
    """Row counts of the main tables."""

    tickets_count: int
    tags_count: int
    comments_count: int


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="healthy",
        version=settings.version,
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Detailed health check including database connectivity.

    Use for monitoring dashboards that need to verify all dependencies.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("database_health_check_failed", error=str(e))
        db_status = "unhealthy"

    overall_status = "healthy" if db_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        timestamp=_now(),
        environment=settings.app_env,
        database=db_status,
    )


@router.get(
    "/api/db/stats",
    response_model=DatabaseStatsResponse,
    summary="Row counts per table",
)
async def database_stats(
    db: AsyncSession = Depends(get_async_session),
) -> DatabaseStatsResponse:
    async def count(model: type) -> int:
        return (await db.scalar(select(func.count()).select_from(model))) or 0

    return DatabaseStatsResponse(
        tickets_count=await count(TicketModel),
        tags_count=await count(TagModel),
        comments_count=await count(CommentModel),
    )
