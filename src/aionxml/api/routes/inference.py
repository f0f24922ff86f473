"""Per-field and per-column hypothesis endpoints."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from aionxml.api.deps import get_services
from aionxml.models.inference import ValueDomainStatistics
from aionxml.services import ServiceContainer

router = APIRouter(tags=["inference"])


@router.get("/fields/{field_name}")
def field_hypotheses(
    field_name: str,
    services: ServiceContainer = Depends(get_services),
) -> dict[str, Any]:
    slot = services.slots.extract_slot_info(field_name)
    return {
        "field_name": field_name,
        "field_type": services.field_types.infer_from_name(field_name).model_dump(),
        "reference": services.references.detect_field(field_name).model_dump(),
        "slot": slot.model_dump() if slot else None,
    }


@router.post("/columns/{field_id}")
def column_domain(
    field_id: int,
    values: list[Optional[str]] = Body(...),
    services: ServiceContainer = Depends(get_services),
) -> ValueDomainStatistics:
    return services.value_domains.analyze_field(field_id, values)
