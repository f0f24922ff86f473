"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from aionxml.api.deps import get_services
from aionxml.services import ServiceContainer

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
def ready(services: ServiceContainer = Depends(get_services)) -> dict[str, str]:
    # Backend failures propagate and are mapped to 503 by the app.
    services.cache_backend.get(services.cache.cache_key("__ready__"))
    services.metadata_store.find_metadata("__ready__")
    return {"status": "ready"}
