"""
Metrics endpoint.

`/metrics` returns the cumulative request counters, guardrail block counts and
per-endpoint call counts since the application started.  The call to
`/metrics` is itself counted before the snapshot is taken.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from metering import Metering

from ..deps import get_metering
from ..schemas import MetricsResponse

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_model=MetricsResponse)
def metrics(metering: Metering = Depends(get_metering)):
    """Return a best-effort snapshot of all counters."""
    with metering.track("/metrics"):
        return metering.snapshot().to_dict()
