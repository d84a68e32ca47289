"""
Entrypoint for the FastAPI application.

Creates the app, configures logging and CORS, attaches the metering bundle
and includes the routers.  This module is intended to be invoked by an ASGI
server (e.g. uvicorn, see `python -m reflectbin`).
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from metering import Metering

from . import __version__
from .config import Settings, settings as default_settings
from .middleware.correlation import RequestIdLogFilter, RequestIdMiddleware
from .routers import auth as auth_router
from .routers import cookies as cookies_router
from .routers import dynamic as dynamic_router
from .routers import formats as formats_router
from .routers import health as health_router
from .routers import echo as echo_router
from .routers import metrics as metrics_router
from .routers import redirects as redirects_router

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
    for handler in root.handlers:
        if not any(isinstance(f, RequestIdLogFilter) for f in handler.filters):
            handler.addFilter(RequestIdLogFilter())


def create_app(
    app_settings: Optional[Settings] = None,
    metering: Optional[Metering] = None,
) -> FastAPI:
    app_settings = app_settings or default_settings
    configure_logging(app_settings.log_level)

    app = FastAPI(title="reflectbin", version=__version__)
    app.state.settings = app_settings
    app.state.metering = metering or Metering()
    app.state.started_at = datetime.now(timezone.utc)

    # Configure CORS
    origins = app_settings.origins
    allow_any = "*" in origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_any else origins,
        allow_credentials=not allow_any,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    # Include routers
    app.include_router(echo_router.router)
    app.include_router(dynamic_router.router)
    app.include_router(redirects_router.router)
    app.include_router(cookies_router.router)
    app.include_router(auth_router.router)
    app.include_router(formats_router.router)
    app.include_router(health_router.router)
    app.include_router(metrics_router.router)

    logging.getLogger(__name__).info(
        "%s %s ready (metrics at /metrics, health at /health)",
        app_settings.service_name,
        __version__,
    )
    return app


app = create_app()
