"""Encoding lookup, detection and round-trip endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from aionxml.api.deps import get_services
from aionxml.models.encoding import ValidationResult
from aionxml.services import ServiceContainer

router = APIRouter(tags=["encoding"])


@router.get("/{table_name}")
def get_encoding(
    table_name: str,
    map_variant: str = "",
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    info = services.cache.get_with_cache(table_name, map_variant)
    return {
        "table_name": table_name,
        "map_variant": map_variant,
        "encoding": info.encoding,
        "has_bom": info.has_bom,
    }


@router.post("/detect")
async def detect(
    request: Request,
    table_name: str | None = None,
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    """Detect the encoding of the raw request body, with table history when named."""
    data = await request.body()
    if table_name:
        info = services.strategy.detect_with_fallback(data, table_name)
    else:
        info = services.detector.detect(data)
    return {
        "encoding": info.encoding,
        "has_bom": info.has_bom,
        "confidence": services.strategy.calculate_confidence(info, data),
    }


@router.post("/{table_name}/baseline")
async def save_baseline(
    table_name: str,
    request: Request,
    map_variant: str = "",
    services: ServiceContainer = Depends(get_services),
) -> dict[str, str]:
    data = await request.body()
    digest = services.validator.save_file_hash(table_name, map_variant, data)
    return {"table_name": table_name, "map_variant": map_variant, "file_hash": digest}


@router.post("/{table_name}/validate")
async def validate(
    table_name: str,
    request: Request,
    map_variant: str = "",
    services: ServiceContainer = Depends(get_services),
) -> ValidationResult:
    data = await request.body()
    return services.validator.validate_round_trip(table_name, map_variant, data)
