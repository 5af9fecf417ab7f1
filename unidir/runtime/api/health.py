"""Health check endpoint."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from unidir.version import __version__

router = APIRouter(tags=["health"])

# Track server start time
_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response."""

    message: str
    status: str
    version: str
    uptime_seconds: float
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health."""
    return HealthResponse(
        message="ok",
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        timestamp=datetime.now(timezone.utc),
    )
