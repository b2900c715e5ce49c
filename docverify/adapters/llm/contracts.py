"""
LLM Contracts - Interfaces every provider backend and metrics sink implements.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ImagePayload, ProviderConfig, ProviderOutcome, ProviderResponse


@runtime_checkable
class Provider(Protocol):
    """
    Contract for an AI provider handle bound to one ProviderConfig.

    Example:
        >>> class EchoProvider:
        ...     name = "echo"
        ...     config = ProviderConfig(provider_name="echo", model="echo-1")
        ...     async def invoke(self, prompt, image=None):
        ...         return ProviderResponse.ok(prompt, "echo", "echo-1")
        >>> assert isinstance(EchoProvider(), Provider)
    """

    name: str
    config: ProviderConfig

    async def invoke(
        self,
        prompt: str,
        image: ImagePayload | None = None,
    ) -> ProviderResponse:
        """
        Send a prompt (and optional image) to the backend.

        Args:
            prompt: Full prompt text
            image: Optional raster image for vision calls

        Returns:
            Typed outcome. Implementations do not raise for HTTP or
            transport failures.
        """
        ...


@runtime_checkable
class MetricsCollector(Protocol):
    """Contract for recording per-call provider metrics."""

    def record(
        self,
        provider_name: str,
        outcome: ProviderOutcome,
        duration_seconds: float,
    ) -> None:
        """Record the outcome of a single provider call."""
        ...
