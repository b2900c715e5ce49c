"""
Provider Routes - Registered LLM providers and their call statistics.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from docverify.adapters.llm import InMemoryMetrics, ProviderKind, ProviderRegistry
from docverify.config import Settings, get_settings

from ..deps import get_metrics, get_registry

router = APIRouter()


@router.get("")
async def list_providers(
    registry: ProviderRegistry = Depends(get_registry),
    metrics: InMemoryMetrics = Depends(get_metrics),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    List registered providers per kind.

    Credentials are never included, only names and models.
    """
    primaries = {
        ProviderKind.VISION: settings.vision_provider,
        ProviderKind.ANALYSIS: settings.analysis_provider,
    }
    body: dict[str, Any] = {
        kind.value: {
            "primary": primaries[kind],
            "providers": [
                {"name": p.name, "model": p.config.model} for p in registry.providers(kind)
            ],
        }
        for kind in ProviderKind
    }
    body["metrics"] = metrics.snapshot()
    return body
