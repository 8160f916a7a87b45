"""Liveness and health endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from loguru import logger

from src.api.constants import LIVENESS_MESSAGE
from src.api.dependencies import SettingsDep
from src.api.schemas.animals import MessageResponse
from src.infrastructure.database.dependencies import get_database
from src.infrastructure.database.session import Database

router = APIRouter(tags=["health"])


@router.get("/", response_model=MessageResponse)
async def root() -> MessageResponse:
    """Liveness message."""
    return MessageResponse(message=LIVENESS_MESSAGE)


@router.get("/health")
async def health(
    settings: SettingsDep,
    database: Annotated[Database, Depends(get_database)],
) -> dict[str, object]:
    """Report service and database status.

    A failing database makes the service ``degraded`` rather than failing the
    probe, so the process is not restarted for an outage it cannot fix.
    """
    is_healthy, error_msg = await database.check_connection()
    status: dict[str, object] = {
        "status": "healthy" if is_healthy else "degraded",
        "database": is_healthy,
        "version": settings.app_version,
        "environment": settings.environment,
    }

    if is_healthy:
        logger.bind(metric_type="db.pool.health", **database.pool_status()).info(
            "Database pool health check"
        )
    else:
        logger.warning("Database health check failed: {}", error_msg)

    return status
