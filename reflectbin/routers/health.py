"""
Healthcheck endpoint.

`/health` returns 200 OK with the uptime and version while the process is up.
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from metering import Metering

from .. import __version__
from ..config import Settings
from ..deps import get_metering, get_settings, get_started_at
from ..schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(
    metering: Metering = Depends(get_metering),
    settings: Settings = Depends(get_settings),
    started_at: datetime = Depends(get_started_at),
):
    """Liveness probe."""
    with metering.track("/health"):
        uptime = datetime.now(timezone.utc) - started_at
        return HealthResponse(
            status="healthy",
            uptime_seconds=int(uptime.total_seconds()),
            started_at=started_at.isoformat(),
            version=__version__,
            service=settings.service_name,
        )
