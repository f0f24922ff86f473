"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aionxml.api.routes import admin, catalog, encoding, health, inference
from aionxml.core.config import AppSettings
from aionxml.core.exceptions import CacheError, PersistenceError
from aionxml.core.log import configure_logging
from aionxml.services import ServiceContainer, build_services


def create_app(
    settings: AppSettings | None = None,
    services: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    A prebuilt ``services`` container is used as-is and left open on shutdown;
    otherwise one is built from ``settings`` and closed with the app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_settings = services.settings if services is not None else (settings or AppSettings())
        configure_logging(app_settings)
        container = services or build_services(app_settings)
        app.state.settings = app_settings
        app.state.services = container
        try:
            yield
        finally:
            if services is None:
                container.close()

    app = FastAPI(
        title="aionxml encoding and schema inference service",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(PersistenceError)
    @app.exception_handler(CacheError)
    async def _backend_unavailable(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    app.include_router(health.router)
    app.include_router(encoding.router, prefix="/encoding")
    app.include_router(inference.router, prefix="/inference")
    app.include_router(catalog.router, prefix="/catalog")
    app.include_router(admin.router, prefix="/admin")
    return app
