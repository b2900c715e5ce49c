"""
Tests for the Ollama provider adapter.
"""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from docverify.adapters.llm import ImagePayload, ProviderConfig, ProviderOutcome

from .client import OllamaProvider


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(
        provider_name="ollama",
        model="llama3.2-vision",
        base_url="http://ollama.test:11434/",
        max_tokens=256,
    )


async def test_generate_with_image(config: ProviderConfig) -> None:
    """Test images go into the images list and the response text is returned."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"model": "llama3.2-vision", "response": "Invoice 42"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        provider = OllamaProvider(config, client)
        response = await provider.invoke("Read", ImagePayload(data=b"img", mime_type="image/png"))

    assert response.success
    assert response.text == "Invoice 42"
    assert str(seen[0].url) == "http://ollama.test:11434/api/generate"
    body = json.loads(seen[0].content)
    assert body["stream"] is False
    assert body["images"] == [base64.b64encode(b"img").decode("ascii")]
    assert body["options"]["num_predict"] == 256
    assert "format" not in body


async def test_json_mode(config: ProviderConfig) -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"response": "{}"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await OllamaProvider(config, client, json_mode=True).invoke("Compare")

    assert seen[0]["format"] == "json"
    assert "images" not in seen[0]


async def test_server_down_is_transient(config: ProviderConfig) -> None:
    """Test a refused connection is retryable."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        response = await OllamaProvider(config, client).invoke("Read")

    assert response.outcome is ProviderOutcome.TRANSIENT_ERROR


async def test_unknown_model_is_business_error(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "model 'llama3.2-vision' not found"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        response = await OllamaProvider(config, client).invoke("Read")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR
    assert "not found" in response.error_message


async def test_empty_response_is_business_error(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": ""})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        response = await OllamaProvider(config, client).invoke("Read")

    assert response.outcome is ProviderOutcome.BUSINESS_ERROR


async def test_null_model_falls_back_to_configured(config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"model": None, "response": "Invoice 42"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        response = await OllamaProvider(config, client).invoke("Read")

    assert response.success
    assert response.model == "llama3.2-vision"
