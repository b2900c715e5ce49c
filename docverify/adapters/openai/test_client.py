"""
Tests for the OpenAI provider adapter.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Callable

import httpx
import pytest
from pydantic import SecretStr

from docverify.adapters.llm import (
    ImagePayload,
    InMemoryMetrics,
    ProviderConfig,
    ProviderOutcome,
)

from .client import OpenAIProvider

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(
        provider_name="openai",
        model="gpt-4o",
        api_key="sk-test",
        base_url="https://api.openai.test/v1",
        max_tokens=500,
        temperature=0.1,
    )


def _provider(
    config: ProviderConfig,
    handler: Handler,
    **kwargs: object,
) -> tuple[OpenAIProvider, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIProvider(config, client, **kwargs), client  # type: ignore[arg-type]


def _completion(content: str | None, finish_reason: str = "stop") -> dict[str, object]:
    return {
        "model": "gpt-4o-2024-08-06",
        "choices": [
            {"message": {"role": "assistant", "content": content}, "finish_reason": finish_reason}
        ],
    }


# --- Request Tests ---


async def test_invoke_sends_image_as_data_url(config: ProviderConfig) -> None:
    """Test vision requests embed the image and auth header."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion("{\"documentType\": \"invoice\"}"))

    provider, client = _provider(config, handler)
    image = ImagePayload(data=b"png-bytes", mime_type="image/png")
    async with client:
        response = await provider.invoke("Extract", image)

    assert response.success
    assert response.model == "gpt-4o-2024-08-06"
    request = seen[0]
    assert str(request.url) == "https://api.openai.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o"
    assert body["max_tokens"] == 500
    content = body["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "Extract"}
    encoded = base64.b64encode(b"png-bytes").decode("ascii")
    assert content[1]["image_url"]["url"] == f"data:image/png;base64,{encoded}"
    assert "response_format" not in body


async def test_json_mode_requests_json_object(config: ProviderConfig) -> None:
    """Test analysis handles ask for JSON output."""
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=_completion("{}"))

    provider, client = _provider(config, handler, json_mode=True)
    async with client:
        await provider.invoke("Compare")

    assert seen[0]["response_format"] == {"type": "json_object"}
    assert seen[0]["messages"] == [{"role": "user", "content": "Compare"}]


# --- Outcome Tests ---


async def test_missing_api_key_is_business_error(config: ProviderConfig) -> None:
    """Test no request is made without credentials."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_completion("x"))

    provider, client = _provider(config.model_copy(update={"api_key": SecretStr("")}), handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR
    assert calls == []


async def test_rate_limit_is_transient(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

    provider, client = _provider(config, handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.outcome is ProviderOutcome.TRANSIENT_ERROR
    assert "Rate limit reached" in response.error_message


async def test_bad_request_is_business_error(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "Invalid image"}})

    provider, client = _provider(config, handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR


async def test_content_filter_is_business_error(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion(None, finish_reason="content_filter"))

    provider, client = _provider(config, handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR


async def test_empty_content_is_business_error(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion("   "))

    provider, client = _provider(config, handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR


async def test_missing_choices_is_transient(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "x"})

    provider, client = _provider(config, handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.outcome is ProviderOutcome.TRANSIENT_ERROR


async def test_null_model_falls_back_to_configured(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={**_completion("Invoice 42"), "model": None})

    provider, client = _provider(config, handler)
    async with client:
        response = await provider.invoke("Extract")

    assert response.success
    assert response.model == "gpt-4o"


async def test_metrics_recorded_per_call(config: ProviderConfig) -> None:
    """Test each call is recorded on the injected collector."""
    metrics = InMemoryMetrics()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion("ok"))

    provider, client = _provider(config, handler, metrics=metrics)
    async with client:
        await provider.invoke("one")
        await provider.invoke("two")

    assert metrics.stats("openai").successful == 2
