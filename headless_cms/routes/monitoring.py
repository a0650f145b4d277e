"""
Monitoring Routes

Provides the health check endpoint.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from headless_cms.config import settings

router = APIRouter(tags=["Monitoring"])

# Application start time for uptime calculation
APP_START_TIME = time.time()


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    version: str
    uptime_seconds: float
    schema_ready: bool


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request) -> HealthStatus:
    """
    Basic health check endpoint.

    Reports whether the headless schema has been published.
    """
    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        uptime_seconds=round(time.time() - APP_START_TIME, 2),
        schema_ready=getattr(request.app.state, "headless_schema", None) is not None,
    )
