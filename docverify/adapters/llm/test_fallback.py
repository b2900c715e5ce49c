"""
Tests for provider retry and fallback policy.
"""

from __future__ import annotations

import asyncio

import pytest

from docverify.config import ProviderNotFoundError

from .fallback import invoke_with_fallback, invoke_with_retry
from .metrics import InMemoryMetrics, NullMetrics
from .models import (
    ImagePayload,
    ProviderConfig,
    ProviderKind,
    ProviderOutcome,
    ProviderResponse,
)
from .registry import ProviderRegistry


class ScriptedProvider:
    """Provider returning a fixed sequence of outcomes."""

    def __init__(
        self,
        name: str,
        script: list[ProviderOutcome | Exception],
        max_retry_attempts: int = 2,
    ) -> None:
        self.name = name
        self.config = ProviderConfig(
            provider_name=name,
            model=f"{name}-model",
            max_retry_attempts=max_retry_attempts,
            retry_delay_seconds=0.0,
        )
        self.script = list(script)
        self.calls = 0
        self.images: list[ImagePayload | None] = []

    async def invoke(
        self,
        prompt: str,
        image: ImagePayload | None = None,
    ) -> ProviderResponse:
        self.calls += 1
        self.images.append(image)
        step = self.script[min(self.calls - 1, len(self.script) - 1)]
        if isinstance(step, BaseException):
            raise step
        if step is ProviderOutcome.SUCCESS:
            return ProviderResponse.ok(f"{self.name} answer", self.name, self.config.model)
        return ProviderResponse(
            outcome=step,
            error_message=f"{self.name} {step.value}",
            provider_name=self.name,
            model=self.config.model,
        )


def _registry(*providers: ScriptedProvider) -> ProviderRegistry:
    registry = ProviderRegistry()
    for provider in providers:
        registry.register(ProviderKind.VISION, provider)
    return registry


# --- Retry Tests ---


async def test_retry_success_first_attempt() -> None:
    """Test a successful call is not retried."""
    provider = ScriptedProvider("openai", [ProviderOutcome.SUCCESS])

    response = await invoke_with_retry(provider, "prompt")

    assert response.success
    assert response.attempts == 1
    assert provider.calls == 1


async def test_retry_transient_then_success() -> None:
    """Test transient failures are retried until success."""
    provider = ScriptedProvider(
        "openai",
        [ProviderOutcome.TRANSIENT_ERROR, ProviderOutcome.TRANSIENT_ERROR, ProviderOutcome.SUCCESS],
    )

    response = await invoke_with_retry(provider, "prompt")

    assert response.success
    assert response.attempts == 3
    assert provider.calls == 3


async def test_retry_exhausted_returns_last_transient() -> None:
    """Test retries stop after max_retry_attempts additional calls."""
    provider = ScriptedProvider("openai", [ProviderOutcome.TRANSIENT_ERROR], max_retry_attempts=2)

    response = await invoke_with_retry(provider, "prompt")

    assert response.outcome is ProviderOutcome.TRANSIENT_ERROR
    assert response.error_message == "openai transient_error"
    assert provider.calls == 3
    assert response.attempts == 3


async def test_retry_zero_attempts_calls_once() -> None:
    """Test max_retry_attempts=0 means a single call."""
    provider = ScriptedProvider("openai", [ProviderOutcome.TRANSIENT_ERROR], max_retry_attempts=0)

    response = await invoke_with_retry(provider, "prompt")

    assert not response.success
    assert provider.calls == 1


async def test_business_error_never_retried() -> None:
    """Test business failures return immediately."""
    provider = ScriptedProvider("openai", [ProviderOutcome.BUSINESS_ERROR])

    response = await invoke_with_retry(provider, "prompt")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR
    assert provider.calls == 1


async def test_unexpected_exception_becomes_transient() -> None:
    """Test a raising provider is treated as transient and retried."""
    provider = ScriptedProvider("openai", [RuntimeError("boom"), ProviderOutcome.SUCCESS])

    response = await invoke_with_retry(provider, "prompt")

    assert response.success
    assert provider.calls == 2


async def test_cancellation_propagates() -> None:
    """Test CancelledError aborts remaining attempts."""
    provider = ScriptedProvider("openai", [asyncio.CancelledError(), ProviderOutcome.SUCCESS])

    with pytest.raises(asyncio.CancelledError):
        await invoke_with_retry(provider, "prompt")
    assert provider.calls == 1


# --- Fallback Tests ---


async def test_fallback_primary_success_short_circuits() -> None:
    """Test alternatives are never called when the primary succeeds."""
    primary = ScriptedProvider("openai", [ProviderOutcome.SUCCESS])
    alternative = ScriptedProvider("gemini", [ProviderOutcome.SUCCESS])
    registry = _registry(primary, alternative)

    response = await invoke_with_fallback(registry, ProviderKind.VISION, "openai", "prompt")

    assert response.success
    assert response.provider_name == "openai"
    assert alternative.calls == 0


async def test_fallback_business_error_moves_to_alternative() -> None:
    """Test a rejected primary falls back without retrying."""
    primary = ScriptedProvider("openai", [ProviderOutcome.BUSINESS_ERROR])
    alternative = ScriptedProvider("gemini", [ProviderOutcome.SUCCESS])
    registry = _registry(primary, alternative)

    response = await invoke_with_fallback(registry, ProviderKind.VISION, "openai", "prompt")

    assert response.success
    assert response.provider_name == "gemini"
    assert response.attempted_providers == ["openai", "gemini"]
    assert primary.calls == 1


async def test_fallback_respects_registration_order() -> None:
    """Test alternatives are tried in registration order, skipping the primary."""
    first = ScriptedProvider("openai", [ProviderOutcome.BUSINESS_ERROR])
    primary = ScriptedProvider("gemini", [ProviderOutcome.BUSINESS_ERROR])
    last = ScriptedProvider("ollama", [ProviderOutcome.SUCCESS])
    registry = _registry(first, primary, last)

    response = await invoke_with_fallback(registry, ProviderKind.VISION, "gemini", "prompt")

    assert response.provider_name == "ollama"
    assert response.attempted_providers == ["gemini", "openai", "ollama"]
    assert first.calls == 1


async def test_fallback_total_failure_message() -> None:
    """Test total failure keeps the primary error and appends alternatives."""
    primary = ScriptedProvider("openai", [ProviderOutcome.BUSINESS_ERROR])
    alternative = ScriptedProvider("gemini", [ProviderOutcome.TRANSIENT_ERROR], max_retry_attempts=1)
    registry = _registry(primary, alternative)

    response = await invoke_with_fallback(registry, ProviderKind.VISION, "openai", "prompt")

    assert not response.success
    assert response.provider_name == "openai"
    assert "openai business_error" in response.error_message
    assert "1 alternative provider(s) also failed" in response.error_message
    assert "gemini (gemini transient_error)" in response.error_message
    assert alternative.calls == 2


async def test_fallback_without_alternatives_returns_primary_failure() -> None:
    """Test a lone failing primary returns its own error unchanged."""
    primary = ScriptedProvider("openai", [ProviderOutcome.BUSINESS_ERROR])
    registry = _registry(primary)

    response = await invoke_with_fallback(registry, ProviderKind.VISION, "openai", "prompt")

    assert response.error_message == "openai business_error"


async def test_fallback_unknown_primary_raises_before_calls() -> None:
    """Test an unknown primary is a configuration error with no calls made."""
    provider = ScriptedProvider("openai", [ProviderOutcome.SUCCESS])
    registry = _registry(provider)

    with pytest.raises(ProviderNotFoundError) as exc_info:
        await invoke_with_fallback(registry, ProviderKind.VISION, "claude", "prompt")

    assert "Primary vision provider 'claude' not found." in str(exc_info.value)
    assert provider.calls == 0


async def test_fallback_forwards_image() -> None:
    """Test the image reaches every attempted provider."""
    image = ImagePayload(data=b"\x89PNG", mime_type="image/png")
    primary = ScriptedProvider("openai", [ProviderOutcome.BUSINESS_ERROR])
    alternative = ScriptedProvider("gemini", [ProviderOutcome.SUCCESS])
    registry = _registry(primary, alternative)

    await invoke_with_fallback(registry, ProviderKind.VISION, "openai", "prompt", image)

    assert primary.images == [image]
    assert alternative.images == [image]


# --- Metrics Tests ---


def test_in_memory_metrics_counts() -> None:
    """Test counters are tracked per provider."""
    metrics = InMemoryMetrics()
    metrics.record("openai", ProviderOutcome.SUCCESS, 1.0)
    metrics.record("openai", ProviderOutcome.TRANSIENT_ERROR, 3.0)

    stats = metrics.stats("openai")
    assert stats.total == 2
    assert stats.successful == 1
    assert stats.failed == 1
    assert stats.success_rate == 50.0
    assert stats.average_seconds == 2.0
    assert metrics.stats("gemini").total == 0


def test_metrics_instances_are_isolated() -> None:
    """Test two collectors never share counters."""
    first = InMemoryMetrics()
    second = InMemoryMetrics()
    first.record("openai", ProviderOutcome.SUCCESS, 0.1)

    assert second.snapshot() == {}
    assert first.snapshot()["openai"]["total"] == 1


def test_null_metrics_accepts_records() -> None:
    """Test the null collector is a no-op."""
    NullMetrics().record("openai", ProviderOutcome.SUCCESS, 0.1)
