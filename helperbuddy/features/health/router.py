"""Health check API endpoints.

- ``/health``: liveness, a fixed OK payload
- ``/health/ready``: database reachability and reminder scheduler state
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helperbuddy.core.dependencies.database import get_db_session
from helperbuddy.features.health.schemas import HealthResponse, ReadinessResponse
from helperbuddy.tasks.scheduler import scheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def health_check() -> HealthResponse:
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    responses={503: {"description": "Database unreachable"}},
)
async def readiness_check(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    response: Response,
) -> ReadinessResponse:
    """Report whether the database answers and the sweep scheduler is running."""
    try:
        await session.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError:
        logger.warning("Readiness check: database unreachable", exc_info=True)
        database_ok = False

    if not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        ready=database_ok,
        checks={"database": database_ok},
        scheduler_running=scheduler.running,
    )


__all__ = ["router"]
