"""
LLM Adapter - Provider contract, registry and fallback policy.

Usage:
    from docverify.adapters.llm import ProviderKind, invoke_with_fallback

    response = await invoke_with_fallback(
        registry, ProviderKind.VISION, "openai", prompt, image
    )
    if response.success:
        print(response.text)
"""

from .contracts import MetricsCollector, Provider
from .fallback import failure_code, invoke_with_fallback, invoke_with_retry
from .metrics import InMemoryMetrics, NullMetrics
from .models import (
    ImagePayload,
    ProviderConfig,
    ProviderKind,
    ProviderOutcome,
    ProviderResponse,
)
from .registry import ProviderRegistry
from .transport import HTTPCallResult, post_json

__all__ = [
    # Contracts
    "Provider",
    "MetricsCollector",
    # Models
    "ProviderKind",
    "ProviderOutcome",
    "ProviderConfig",
    "ProviderResponse",
    "ImagePayload",
    # Registry / policy
    "ProviderRegistry",
    "invoke_with_retry",
    "invoke_with_fallback",
    "failure_code",
    # Metrics
    "InMemoryMetrics",
    "NullMetrics",
    # Transport
    "HTTPCallResult",
    "post_json",
]
