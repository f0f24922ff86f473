"""Read-only access to the pattern category catalog."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from aionxml.core.exceptions import CategoryNotFoundError
from aionxml.models.pattern_category import PatternCategory, all_categories, require_category

router = APIRouter(tags=["catalog"])


@router.get("")
async def list_categories() -> list[PatternCategory]:
    return list(all_categories())


@router.get("/{code}")
async def get_category(code: str) -> PatternCategory:
    try:
        return require_category(code)
    except CategoryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
