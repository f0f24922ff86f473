"""Request-scoped access to the lifespan-owned service container."""

from __future__ import annotations

from fastapi import Request

from aionxml.services import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services
