"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the shared HTTP client, provider registry
and pipeline. The HTTP client is the only connection pool in the process.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import httpx

from docverify.adapters.llm import InMemoryMetrics, ProviderRegistry
from docverify.adapters.providers import build_registry
from docverify.config import get_settings
from docverify.domains.orchestration import PipelineFacade, build_pipeline

logger = logging.getLogger(__name__)


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Get the shared pooled HTTP client."""
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.llm_timeout_seconds),
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
    )


@lru_cache
def get_metrics() -> InMemoryMetrics:
    """Get the process-wide provider metrics collector."""
    return InMemoryMetrics()


@lru_cache
def get_registry() -> ProviderRegistry:
    """Get provider registry singleton."""
    return build_registry(get_settings(), get_http_client(), get_metrics())


@lru_cache
def get_pipeline() -> PipelineFacade:
    """Get validation pipeline singleton."""
    return build_pipeline(get_settings(), get_registry())


async def init_services() -> None:
    """
    Initialize services on startup.

    Building the pipeline eagerly surfaces configuration errors (unknown
    providers) before the first request.
    """
    get_pipeline()


async def cleanup_services() -> None:
    """Close the shared HTTP client and drop cached singletons."""
    if get_http_client.cache_info().currsize:
        await get_http_client().aclose()
    for factory in (get_pipeline, get_registry, get_metrics, get_http_client):
        factory.cache_clear()
