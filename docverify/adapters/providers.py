"""
Provider Wiring - Build the provider registry from settings.

Every enabled backend is registered twice, once per kind, because vision and
analysis use different models. Registration follows ``enabled_providers``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from docverify.config import ConfigurationError

from .gemini import GeminiProvider
from .llm import (
    MetricsCollector,
    ProviderConfig,
    ProviderKind,
    ProviderRegistry,
)
from .ollama import OllamaProvider
from .openai import OpenAIProvider

if TYPE_CHECKING:
    from docverify.config import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "PROVIDER_TYPES",
    "build_provider_config",
    "build_provider_configs",
    "build_registry",
]

PROVIDER_TYPES = {
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
    "ollama": OllamaProvider,
}


def build_provider_config(
    settings: Settings,
    provider_name: str,
    kind: ProviderKind,
) -> ProviderConfig:
    """
    Build the config for one backend and kind.

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    vision = kind is ProviderKind.VISION
    if provider_name == "openai":
        backend = {
            "model": settings.openai_vision_model if vision else settings.openai_analysis_model,
            "api_key": settings.openai_api_key,
            "base_url": settings.openai_base_url,
        }
    elif provider_name == "gemini":
        backend = {
            "model": settings.gemini_vision_model if vision else settings.gemini_analysis_model,
            "api_key": settings.gemini_api_key,
            "base_url": settings.gemini_base_url,
        }
    elif provider_name == "ollama":
        backend = {
            "model": settings.ollama_vision_model if vision else settings.ollama_analysis_model,
            "base_url": settings.ollama_url,
        }
    else:
        raise ConfigurationError(
            f"Unknown provider '{provider_name}'",
            {"provider": provider_name, "known": sorted(PROVIDER_TYPES)},
        )

    return ProviderConfig(
        provider_name=provider_name,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        timeout_seconds=settings.llm_timeout_seconds,
        max_retry_attempts=settings.llm_max_retry_attempts,
        retry_delay_seconds=settings.llm_retry_delay_seconds,
        **backend,
    )


def build_provider_configs(settings: Settings, kind: ProviderKind) -> list[ProviderConfig]:
    """Configs for every enabled backend of one kind, in registration order."""
    return [build_provider_config(settings, name, kind) for name in settings.enabled_providers]


def build_registry(
    settings: Settings,
    client: httpx.AsyncClient,
    metrics: MetricsCollector | None = None,
) -> ProviderRegistry:
    """
    Register every enabled provider for both kinds.

    Args:
        settings: Application settings
        client: Shared pooled HTTP client handed to every provider
        metrics: Metrics sink shared by the providers

    Returns:
        Populated registry
    """
    registry = ProviderRegistry()
    for kind in ProviderKind:
        for config in build_provider_configs(settings, kind):
            provider_type = PROVIDER_TYPES[config.provider_name]
            registry.register(
                kind,
                provider_type(
                    config,
                    client,
                    metrics=metrics,
                    json_mode=kind is ProviderKind.ANALYSIS,
                ),
            )

    logger.info(
        "Provider registry ready: vision=%s analysis=%s",
        registry.names(ProviderKind.VISION),
        registry.names(ProviderKind.ANALYSIS),
    )
    return registry
