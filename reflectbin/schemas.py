"""
Pydantic schemas for response bodies.

These classes define the shapes of JSON data returned from the endpoints.
Using Pydantic keeps the OpenAPI docs generated by FastAPI accurate.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestInfo(BaseModel):
    """Reflection of an inbound request; unset body fields are omitted."""

    args: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    origin: str
    url: str
    method: Optional[str] = None
    data: Optional[str] = None
    json_body: Optional[Any] = Field(default=None, alias="json", serialization_alias="json")
    form: Optional[Dict[str, str]] = None

    model_config = ConfigDict(populate_by_name=True)


class SecurityBlocks(BaseModel):
    redirects_blocked: int = 0
    delays_blocked: int = 0
    bytes_blocked: int = 0
    dangerous_urls_blocked: int = 0


class MetricsResponse(BaseModel):
    total_requests: int
    successful_requests: int
    failed_requests: int
    security_blocks: SecurityBlocks
    endpoint_stats: Dict[str, int] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str = "healthy"
    uptime_seconds: int
    started_at: str
    version: str
    service: str
