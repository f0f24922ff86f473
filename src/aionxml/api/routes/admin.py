"""Admin endpoints for the encoding cache and metadata reports."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from aionxml.api.deps import get_services
from aionxml.models.encoding import EncodingStatistic, ValidationSummary
from aionxml.services import ServiceContainer

router = APIRouter(tags=["admin"])


@router.get("/cache/stats")
def cache_stats(services: ServiceContainer = Depends(get_services)) -> dict[str, Any]:
    stats = services.cache.stats()
    return {**stats.model_dump(), "hit_rate": stats.hit_rate}


@router.post("/cache/clear")
def cache_clear(services: ServiceContainer = Depends(get_services)) -> dict[str, int]:
    return {"cleared": services.cache.clear()}


@router.get("/encoding/statistics")
def encoding_statistics(services: ServiceContainer = Depends(get_services)) -> list[EncodingStatistic]:
    return services.metadata_store.encoding_statistics()


@router.get("/validation/summary")
def validation_summary(services: ServiceContainer = Depends(get_services)) -> ValidationSummary:
    return services.validator.summarize_validations()
