"""
FastAPI dependency functions shared by the routers.

The metering bundle and the service start time live on `app.state`, created
once per application in `create_app()`, so every handler of one app shares
the same counters and separate apps (e.g. in tests) never do.
"""
from __future__ import annotations

from datetime import datetime

from fastapi import Request

from metering import Metering

from .config import Settings


def get_metering(request: Request) -> Metering:
    return request.app.state.metering


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_started_at(request: Request) -> datetime:
    return request.app.state.started_at


def public_base_url(request: Request) -> str:
    """Base URL without trailing slash, preferring the configured public URL."""
    configured = request.app.state.settings.public_url
    base = configured or str(request.base_url)
    return base.rstrip("/")


def client_origin(request: Request) -> str:
    """Caller address, honouring the usual proxy headers first."""
    forwarded = request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip")
    if forwarded:
        return forwarded
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"
