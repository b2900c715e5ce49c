"""
Health Routes - Liveness, provider readiness and the endpoint index.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.routing import APIRoute

from docverify import __version__
from docverify.adapters.llm import ProviderKind, ProviderRegistry

from ..deps import get_registry

router = APIRouter()


@router.get("/health")
async def health_check(registry: ProviderRegistry = Depends(get_registry)) -> dict[str, Any]:
    """
    Report liveness and whether each provider kind has something to call.

    A kind with no registered provider makes the service "degraded": it
    still answers, but every pipeline run would fail in that phase.
    """
    ready = {kind.value: bool(registry.providers(kind)) for kind in ProviderKind}
    return {
        "status": "healthy" if all(ready.values()) else "degraded",
        "service": "docverify",
        "version": __version__,
        "providers_ready": ready,
    }


@router.get("/api")
async def api_index(request: Request) -> dict[str, Any]:
    endpoints = sorted(
        {
            f"{method} {route.path}"
            for route in request.app.routes
            if isinstance(route, APIRoute)
            for method in route.methods
        }
    )
    return {"name": request.app.title, "version": __version__, "docs": "/docs", "endpoints": endpoints}
