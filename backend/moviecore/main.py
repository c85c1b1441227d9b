"""Application bootstrap for the Movie Matching API.

This module wires the FastAPI application, attaches middleware, and exposes small lifecycle utilities.

Functions:
    create_app(settings, container): Build the FastAPI app; an injected container is used as-is and not closed.
    lifespan(app): Construct the services on startup, kick off the poster prefetch, and tear down on shutdown.
    health_check(): Lightweight readiness check used by monitoring and local smoke tests.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moviecore.api import api_router
from moviecore.core.config import Settings, get_settings
from moviecore.core.container import ServiceContainer

_LOGGER = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    settings = settings or (container.settings if container is not None else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.log_level.upper())
        owned = container is None
        services = container if container is not None else await ServiceContainer.create(settings)
        app.state.container = services
        if settings.prefetch_on_startup and services.catalog_configured:
            await services.prefetcher.start_if_needed()
        elif settings.prefetch_on_startup:
            _LOGGER.info("Catalog client not configured; skipping poster prefetch")
        try:
            yield
        finally:
            if owned:
                await services.aclose()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    if container is not None:
        app.state.container = container
    return app


app = create_app()
