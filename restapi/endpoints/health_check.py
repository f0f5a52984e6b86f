"""Health check endpoint for monitoring application status."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from components.core import schemas
from components.core.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("", response_model=schemas.HealthCheck)
async def health_check(request: Request):
    """Check the health status of the service and its database."""
    settings = get_settings()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await request.app.state.db_manager.ping()
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "serviceName": settings.APP_NAME,
                "status": "unhealthy",
                "message": "Database connection failed",
                "timestamp": timestamp,
            },
        )

    return schemas.HealthCheck(
        success=True,
        service_name=settings.APP_NAME,
        status="healthy",
        message="Server and database are healthy",
        timestamp=timestamp,
    )
